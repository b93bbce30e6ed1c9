import mongomock

import movie_reviews
from movie_reviews import create_app


def post_json(client, path, payload):
    return client.post(path, json=payload)


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_create_and_list_users(client):
    resp = post_json(client, "/users", {"name": "Ada", "email": "ada@example.com"})

    assert resp.status_code == 201
    created = resp.get_json()
    assert created["name"] == "Ada"
    assert client.get("/users").get_json() == [created]


def test_duplicate_user_returns_error(client):
    post_json(client, "/users", {"name": "Ada", "email": "ada@example.com"})
    resp = post_json(client, "/users", {"name": "Ada", "email": "ada@example.com"})

    assert resp.status_code == 500
    assert "error" in resp.get_json()


def test_missing_body_is_a_validation_failure(client):
    resp = client.post("/users", data="not json", content_type="text/plain")

    assert resp.status_code == 500
    assert "name" in resp.get_json()["error"]


def test_review_out_of_range_returns_error(client):
    resp = post_json(client, "/reviews", {"rating": 11, "movieId": "m", "userId": "u"})

    assert resp.status_code == 500
    assert "rating" in resp.get_json()["error"]


def test_reviews_are_expanded(client):
    user = post_json(client, "/users", {"name": "Ada", "email": "ada@example.com"}).get_json()
    movie = post_json(client, "/movies", {"title": "Alien", "genre": "Sci-Fi", "releaseYear": 1979}).get_json()
    resp = post_json(client, "/reviews", {"rating": 9, "comment": "Great", "movieId": movie["_id"], "userId": user["_id"]})
    assert resp.status_code == 201

    [review] = client.get("/reviews").get_json()

    assert review["userId"] == {"name": "Ada"}
    assert review["movieId"] == {"title": "Alien"}
    assert review["comment"] == "Great"


def test_movie_reports(client):
    alien = post_json(client, "/movies", {"title": "Alien", "genre": "Sci-Fi"}).get_json()
    heat = post_json(client, "/movies", {"title": "Heat", "genre": "Crime"}).get_json()
    for movie, rating in [(alien, 4), (alien, 2), (heat, 5)]:
        post_json(client, "/reviews", {"rating": rating, "movieId": movie["_id"], "userId": "u"})

    ratings = client.get("/movies/ratings").get_json()
    top = client.get("/movies/top-sci-fi").get_json()

    assert ratings[1] == {"title": "Alien", "genre": "Sci-Fi", "avgRating": 3.0, "reviewCount": 2}
    assert top == [{"title": "Alien", "genre": "Sci-Fi", "avgRating": 4.0, "reviewCount": 1}]


def test_posts_endpoints(client):
    user = post_json(client, "/users", {"name": "Ada", "email": "ada@example.com"}).get_json()
    for n in range(4):
        resp = post_json(client, "/posts", {"title": f"post {n}", "content": "body", "user": user["_id"]})
        assert resp.status_code == 201

    posts = client.get("/posts").get_json()
    clean = client.get("/posts/clean").get_json()
    latest = client.get("/posts/latest").get_json()

    assert len(posts) == 4
    assert all(post["user"]["_id"] == user["_id"] for post in posts)
    assert all(
        post == {"title": post["title"], "content": "body", "user": {"name": "Ada", "email": "ada@example.com"}}
        for post in clean
    )
    assert [post["title"] for post in latest] == ["post 3", "post 2", "post 1"]
    assert isinstance(latest[0]["createdAt"], str)


def test_seed_review_disabled_by_default(client):
    assert client.get("/seed-review").status_code == 404


def test_seed_review_when_enabled():
    app = create_app(
        {"TESTING": True, "MONGODB_DB": "movie_reviews_test", "ENABLE_SEED": True},
        mongo_client=mongomock.MongoClient(),
    )
    client = app.test_client()

    seeded = client.get("/seed-review").get_json()
    [review] = client.get("/reviews").get_json()

    assert seeded["rating"] == 5
    assert review["movieId"] is None
    assert review["userId"] is None


def test_malformed_numbers_are_reported_as_errors(client):
    bad_rating = post_json(client, "/reviews", {"rating": "--5"})
    bad_year = post_json(client, "/movies", {"title": "Alien", "releaseYear": "²"})
    huge_year = post_json(client, "/movies", {"title": "Alien", "releaseYear": 10**30})

    for resp, field in [(bad_rating, "rating"), (bad_year, "releaseYear"), (huge_year, "releaseYear")]:
        assert resp.status_code == 500
        assert field in resp.get_json()["error"]
    assert client.get("/movies").get_json() == []


def test_default_client_is_timezone_aware(monkeypatch):
    seen = {}

    def fake_client(*args, **kwargs):
        seen.update(kwargs)
        return mongomock.MongoClient()

    monkeypatch.setattr(movie_reviews, "MongoClient", fake_client)
    create_app({"TESTING": True, "MONGODB_DB": "movie_reviews_test"})

    assert seen["tz_aware"] is True
