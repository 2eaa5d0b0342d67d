"""
Books Router

Endpoints:
- POST /books - Add a book (authenticated)
- GET /books - List books with filters, sorting and pagination
- GET /books/{book_id} - Book details with rating and paginated reviews

Books cannot be updated or deleted through the API.
"""

from fastapi import APIRouter, Request, status

from app.config import get_settings
from app.dependencies import BookFilters, CurrentUser, DbSession, Pagination
from app.schemas import BookCreate, BookDetailData, BookListData, BookResponse, Envelope
from app.services import catalog
from app.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        400: {"description": "Validation error or duplicate ISBN"},
        404: {"description": "Book not found"},
    },
)


@router.post(
    "",
    response_model=Envelope[BookResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add a book",
    description="Add a new book to the catalog. Requires authentication. ISBN must be unique when given.",
)
@limiter.limit(settings.rate_limit_write)
def create_book(
    request: Request,
    book_data: BookCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> Envelope[BookResponse]:
    """
    Create a new book owned by the caller.

    Raises:
        ValidationError: 400 with one entry per violated field
        ConflictError: 400 if the ISBN is already used
        AuthError: 401 if not authenticated
    """
    book = catalog.create_book(db, book_data, owner_id=current_user.id)
    return Envelope(message="Book added successfully", data=book)


@router.get(
    "",
    response_model=Envelope[BookListData],
    summary="List books",
    description="Get a paginated list of books with optional author/genre/year filters and sorting.",
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    filters: BookFilters,
) -> Envelope[BookListData]:
    """
    List books, each with its current average rating and review count.

    Examples:
        GET /api/books?author=tolkien
        GET /api/books?genre=fantasy&sort=publishedYear&order=asc
        GET /api/books?year=1949&page=2&limit=5
    """
    data = catalog.list_books(
        db,
        author=filters.author,
        genre=filters.genre,
        year=filters.year,
        sort=filters.sort,
        order=filters.order,
        page=pagination.page,
        limit=pagination.limit,
    )
    return Envelope(message="Books retrieved successfully", data=data)


@router.get(
    "/{book_id}",
    response_model=Envelope[BookDetailData],
    summary="Get book details",
    description="Get a book with its average rating and a page of its reviews (newest first).",
)
@limiter.limit(settings.rate_limit_default)
def get_book(
    request: Request,
    book_id: str,
    db: DbSession,
    pagination: Pagination,
) -> Envelope[BookDetailData]:
    """
    Get a single book by id.

    page and limit apply to the nested reviews.
    """
    data = catalog.get_book_by_id(db, book_id, page=pagination.page, limit=pagination.limit)
    return Envelope(message="Book details retrieved successfully", data=data)
