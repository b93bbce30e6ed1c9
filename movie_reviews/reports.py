from movie_reviews.errors import driver_errors
from movie_reviews.models import KINDS

MOVIES = KINDS["movie"].collection
REVIEWS = KINDS["review"].collection

TOP_GENRE = "Sci-Fi"
TOP_MIN_RATING = 3
TOP_LIMIT = 3

REPORT_FIELDS = {"_id": 0, "title": 1, "genre": 1, "avgRating": 1, "reviewCount": 1}


def _aggregate(db, pipeline):
    with driver_errors():
        rows = list(db[REVIEWS].aggregate(pipeline))
    for row in rows:
        row["avgRating"] = float(row["avgRating"])
    return rows


def average_rating_per_movie(db):
    ## reviews of deleted movies drop out at $unwind
    pipeline = [
        {
            "$group": {
                "_id": "$movieId",
                "avgRating": {"$avg": "$rating"},
                "reviewCount": {"$sum": 1},
            }
        },
        {
            "$lookup": {
                "from": MOVIES,
                "localField": "_id",
                "foreignField": "_id",
                "as": "movie",
            }
        },
        {"$unwind": "$movie"},
        {
            "$project": {
                "_id": 0,
                "title": "$movie.title",
                "genre": "$movie.genre",
                "avgRating": 1,
                "reviewCount": 1,
            }
        },
        {"$sort": {"avgRating": -1}},
    ]
    return _aggregate(db, pipeline)


def top_rated_by_genre(db, genre=TOP_GENRE, min_rating=TOP_MIN_RATING, limit=TOP_LIMIT):
    if limit <= 0:
        return []
    pipeline = [
        {
            "$lookup": {
                "from": MOVIES,
                "localField": "movieId",
                "foreignField": "_id",
                "as": "movie",
            }
        },
        {"$unwind": "$movie"},
        {"$match": {"movie.genre": genre, "rating": {"$gte": min_rating}}},
        {
            "$group": {
                "_id": "$movie._id",
                "title": {"$first": "$movie.title"},
                "genre": {"$first": "$movie.genre"},
                "avgRating": {"$avg": "$rating"},
                "reviewCount": {"$sum": 1},
            }
        },
        {"$sort": {"avgRating": -1}},
        {"$limit": limit},
        {"$project": REPORT_FIELDS},
    ]
    return _aggregate(db, pipeline)
