from dataclasses import dataclass, field
from datetime import datetime

from movie_reviews import schemas


@dataclass(frozen=True)
class Reference:
    kind: str
    id: str


@dataclass
class User:
    _id: str
    name: str
    email: str


@dataclass
class Movie:
    _id: str
    title: str
    genre: str = None
    releaseYear: int = None
    director: str = None


@dataclass
class Post:
    _id: str
    title: str = None
    content: str = None
    user: str = None  ## _id of the author
    createdAt: datetime = None
    updatedAt: datetime = None


@dataclass
class Review:
    _id: str
    rating: int
    comment: str = None
    movieId: str = None
    userId: str = None
    createdAt: datetime = None
    updatedAt: datetime = None


@dataclass(frozen=True)
class Kind:
    name: str
    collection: str
    model: type
    schema: type
    timestamps: bool = False
    unique: tuple = ()
    references: dict = field(default_factory=dict)  ## field -> target kind


KINDS = {
    "user": Kind("user", "users", User, schemas.UserIn, unique=("email",)),
    "movie": Kind("movie", "movies", Movie, schemas.MovieIn),
    "post": Kind("post", "posts", Post, schemas.PostIn, timestamps=True, references={"user": "user"}),
    "review": Kind(
        "review",
        "reviews",
        Review,
        schemas.ReviewIn,
        timestamps=True,
        references={"movieId": "movie", "userId": "user"},
    ),
}
