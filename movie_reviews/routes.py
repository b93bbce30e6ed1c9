from flask import Blueprint, abort, current_app, jsonify, request

from movie_reviews import reports
from movie_reviews.errors import StoreError

api = Blueprint("api", __name__)

LATEST_POSTS = 3

SEED_REVIEW = {
    "rating": 5,
    "comment": "Seeded review",
    "movieId": "6650fc1ed1f081d2a8a9fa92",
    "userId": "6650fbcfd1f081d2a8a9fa91",
}


def _payload():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _create(kind):
    record = current_app.store.create(kind, _payload())
    return jsonify(record), 201


@api.errorhandler(StoreError)
def store_error(e):
    current_app.logger.warning("request_failed path=%s error=%s", request.path, e)
    return jsonify({"error": str(e)}), 500


@api.get("/health")
def health():
    return jsonify({"status": "ok"})


@api.post("/users")
def create_user():
    return _create("user")


@api.get("/users")
def list_users():
    return jsonify(current_app.store.find_all("user"))


@api.post("/movies")
def create_movie():
    return _create("movie")


@api.get("/movies")
def list_movies():
    return jsonify(current_app.store.find_all("movie"))


@api.get("/movies/ratings")
def movie_ratings():
    return jsonify(reports.average_rating_per_movie(current_app.db))


@api.get("/movies/top-sci-fi")
def top_sci_fi():
    rows = reports.top_rated_by_genre(
        current_app.db,
        genre=reports.TOP_GENRE,
        min_rating=reports.TOP_MIN_RATING,
        limit=reports.TOP_LIMIT,
    )
    return jsonify(rows)


@api.post("/reviews")
def create_review():
    return _create("review")


@api.get("/reviews")
def list_reviews():
    reviews = current_app.store.find_with_expansion(
        "review",
        {
            "userId": {"name": 1, "_id": 0},
            "movieId": {"title": 1, "_id": 0},
        },
    )
    return jsonify(reviews)


@api.get("/seed-review")
def seed_review():
    if not current_app.config["ENABLE_SEED"]:
        abort(404)
    return jsonify(current_app.store.create("review", SEED_REVIEW))


@api.post("/posts")
def create_post():
    return _create("post")


@api.get("/posts")
def list_posts():
    return jsonify(current_app.store.find_with_expansion("post", {"user": None}))


@api.get("/posts/clean")
def list_posts_clean():
    posts = current_app.store.find_with_expansion(
        "post",
        {"user": {"name": 1, "email": 1, "_id": 0}},
        projection={"title": 1, "content": 1, "user": 1, "_id": 0},
    )
    return jsonify(posts)


@api.get("/posts/latest")
def latest_posts():
    return jsonify(current_app.store.find_latest("post", LATEST_POSTS, expand={"user": None}))
