"""
GraphQL API Tests

Tests for the /graphql endpoint:
- Query tests (bookCount, authorCount, allBooks, allAuthors, me)
- Mutation tests (addBook, editAuthor, createUser, login)
- Authentication and write-policy tests
"""

from fastapi.testclient import TestClient

from library_api.models import Author, Book, User
from tests.conftest import TEST_PASSWORD

# =============================================================================
# Helper Functions
# =============================================================================


def graphql_query(client: TestClient, query: str, variables: dict = None, token: str = None):
    """Execute a GraphQL query and return the response."""
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    payload = {"query": query}
    if variables:
        payload["variables"] = variables

    response = client.post("/graphql", json=payload, headers=headers)
    return response.json()


COUNTS_QUERY = """
query {
    bookCount
    authorCount
}
"""

ALL_BOOKS_QUERY = """
query($author: String, $genre: String) {
    allBooks(author: $author, genre: $genre) {
        id
        title
        published
        genres
        author {
            name
        }
    }
}
"""

ALL_AUTHORS_QUERY = """
query {
    allAuthors {
        id
        name
        born
        bookCount
    }
}
"""

ME_QUERY = """
query {
    me {
        id
        username
        favouriteGenre
        friends {
            username
        }
    }
}
"""

ADD_BOOK_MUTATION = """
mutation($title: String!, $published: Int!, $author: String!, $genres: [String!]) {
    addBook(title: $title, published: $published, author: $author, genres: $genres) {
        id
        title
        published
        genres
        author {
            name
            born
            bookCount
        }
    }
}
"""

EDIT_AUTHOR_MUTATION = """
mutation($name: String!, $setBornTo: Int!) {
    editAuthor(name: $name, setBornTo: $setBornTo) {
        name
        born
    }
}
"""

CREATE_USER_MUTATION = """
mutation($username: String!, $password: String!, $favouriteGenre: String!) {
    createUser(username: $username, password: $password, favouriteGenre: $favouriteGenre) {
        id
        username
        favouriteGenre
    }
}
"""

LOGIN_MUTATION = """
mutation($username: String!, $password: String!) {
    login(username: $username, password: $password) {
        value
    }
}
"""

GATSBY = {
    "title": "Gatsby",
    "published": 1925,
    "author": "F. Scott Fitzgerald",
    "genres": ["classic"],
}


def add_book(client: TestClient, token: str, **variables) -> dict:
    return graphql_query(client, ADD_BOOK_MUTATION, variables=variables, token=token)


# =============================================================================
# Query Tests
# =============================================================================


class TestCountQueries:
    """Tests for bookCount and authorCount."""

    def test_counts_empty(self, client: TestClient):
        result = graphql_query(client, COUNTS_QUERY)

        assert "errors" not in result
        assert result["data"] == {"bookCount": 0, "authorCount": 0}

    def test_counts_with_data(self, client: TestClient, sample_books: list[Book]):
        result = graphql_query(client, COUNTS_QUERY)

        assert result["data"] == {"bookCount": 4, "authorCount": 3}


class TestAllBooksQuery:
    """Tests for the allBooks query and its filters."""

    def test_all_books(self, client: TestClient, sample_books: list[Book]):
        result = graphql_query(client, ALL_BOOKS_QUERY)

        assert "errors" not in result
        books = result["data"]["allBooks"]
        assert [b["title"] for b in books] == [b.title for b in sample_books]
        assert books[0]["author"]["name"] == "Robert Martin"
        assert books[0]["genres"] == ["refactoring"]

    def test_filter_by_author(self, client: TestClient, sample_books: list[Book]):
        result = graphql_query(client, ALL_BOOKS_QUERY, variables={"author": "Robert Martin"})

        titles = {b["title"] for b in result["data"]["allBooks"]}
        assert titles == {"Clean Code", "Agile software development"}

    def test_filter_by_genre(self, client: TestClient, sample_books: list[Book]):
        result = graphql_query(client, ALL_BOOKS_QUERY, variables={"genre": "refactoring"})

        titles = {b["title"] for b in result["data"]["allBooks"]}
        assert titles == {"Clean Code", "Refactoring, edition 2"}

    def test_filter_by_author_and_genre_is_exact_subset(
        self, client: TestClient, sample_books: list[Book]
    ):
        everything = graphql_query(client, ALL_BOOKS_QUERY)["data"]["allBooks"]
        expected = [
            b for b in everything
            if b["author"]["name"] == "Robert Martin" and "refactoring" in b["genres"]
        ]

        result = graphql_query(
            client,
            ALL_BOOKS_QUERY,
            variables={"author": "Robert Martin", "genre": "refactoring"},
        )

        assert result["data"]["allBooks"] == expected
        assert [b["title"] for b in expected] == ["Clean Code"]

    def test_author_filter_ignores_surrounding_whitespace(
        self, client: TestClient, sample_books: list[Book]
    ):
        result = graphql_query(client, ALL_BOOKS_QUERY, variables={"author": " Robert Martin "})

        titles = {b["title"] for b in result["data"]["allBooks"]}
        assert titles == {"Clean Code", "Agile software development"}

    def test_unknown_author_returns_empty_list(
        self, client: TestClient, sample_books: list[Book]
    ):
        result = graphql_query(client, ALL_BOOKS_QUERY, variables={"author": "Nobody Known"})

        assert "errors" not in result
        assert result["data"]["allBooks"] == []

    def test_unknown_author_with_genre_returns_empty_list(
        self, client: TestClient, sample_books: list[Book]
    ):
        result = graphql_query(
            client,
            ALL_BOOKS_QUERY,
            variables={"author": "Nobody Known", "genre": "refactoring"},
        )

        assert "errors" not in result
        assert result["data"]["allBooks"] == []

    def test_unknown_genre_returns_empty_list(
        self, client: TestClient, sample_books: list[Book]
    ):
        result = graphql_query(client, ALL_BOOKS_QUERY, variables={"genre": "poetry"})

        assert result["data"]["allBooks"] == []


class TestAllAuthorsQuery:
    """Tests for the allAuthors query."""

    def test_all_authors_with_book_counts(
        self, client: TestClient, sample_books: list[Book]
    ):
        result = graphql_query(client, ALL_AUTHORS_QUERY)

        assert "errors" not in result
        authors = {a["name"]: a for a in result["data"]["allAuthors"]}
        assert authors["Robert Martin"]["bookCount"] == 2
        assert authors["Robert Martin"]["born"] == 1952
        assert authors["Martin Fowler"]["bookCount"] == 1
        assert authors["Martin Fowler"]["born"] is None

    def test_author_without_books(self, client: TestClient, sample_author: Author):
        result = graphql_query(client, ALL_AUTHORS_QUERY)

        assert result["data"]["allAuthors"] == [
            {
                "id": str(sample_author.id),
                "name": "Robert Martin",
                "born": 1952,
                "bookCount": 0,
            }
        ]


class TestMeQuery:
    """Tests for the me query (current user)."""

    def test_me_authenticated(self, client: TestClient, sample_user: User, auth_token: str):
        result = graphql_query(client, ME_QUERY, token=auth_token)

        assert "errors" not in result
        assert result["data"]["me"] == {
            "id": str(sample_user.id),
            "username": "mluukkai",
            "favouriteGenre": "refactoring",
            "friends": [],
        }

    def test_me_unauthenticated(self, client: TestClient):
        result = graphql_query(client, ME_QUERY)

        assert "errors" not in result
        assert result["data"]["me"] is None

    def test_me_with_invalid_token(self, client: TestClient, sample_user: User):
        result = graphql_query(client, ME_QUERY, token="not-a-valid-token")

        assert "errors" not in result
        assert result["data"]["me"] is None

    def test_me_lowercase_scheme(self, client: TestClient, sample_user: User, auth_token: str):
        response = client.post(
            "/graphql",
            json={"query": ME_QUERY},
            headers={"Authorization": f"bearer {auth_token}"},
        )

        assert response.json()["data"]["me"]["username"] == "mluukkai"


# =============================================================================
# Mutation Tests
# =============================================================================


class TestAddBookMutation:
    """Tests for addBook."""

    def test_gatsby_on_empty_store(self, client: TestClient, auth_token: str):
        result = add_book(client, auth_token, **GATSBY)

        assert "errors" not in result
        book = result["data"]["addBook"]
        assert book["title"] == "Gatsby"
        assert book["published"] == 1925
        assert book["genres"] == ["classic"]
        assert book["author"] == {"name": "F. Scott Fitzgerald", "born": None, "bookCount": 1}

        counts = graphql_query(client, COUNTS_QUERY)["data"]
        assert counts == {"bookCount": 1, "authorCount": 1}

        authors = graphql_query(client, ALL_AUTHORS_QUERY)["data"]["allAuthors"]
        assert authors[0]["bookCount"] == 1

    def test_added_book_is_listed(self, client: TestClient, auth_token: str):
        add_book(client, auth_token, **GATSBY)

        books = graphql_query(client, ALL_BOOKS_QUERY)["data"]["allBooks"]

        assert len(books) == 1
        book = books[0]
        assert book["title"] == GATSBY["title"]
        assert book["published"] == GATSBY["published"]
        assert book["genres"] == GATSBY["genres"]
        assert book["author"]["name"] == GATSBY["author"]

    def test_author_count_grows_only_for_new_author(
        self, client: TestClient, auth_token: str
    ):
        add_book(client, auth_token, **GATSBY)

        result = add_book(
            client,
            auth_token,
            title="Tender Is the Night",
            published=1934,
            author="F. Scott Fitzgerald",
            genres=["classic"],
        )

        assert "errors" not in result
        assert result["data"]["addBook"]["author"]["bookCount"] == 2
        counts = graphql_query(client, COUNTS_QUERY)["data"]
        assert counts == {"bookCount": 2, "authorCount": 1}

    def test_book_count_current_across_mutations_in_one_request(
        self, client: TestClient, auth_token: str
    ):
        mutation = """
        mutation {
            first: addBook(title: "Book number one", published: 2001, author: "Some Author") {
                author { bookCount }
            }
            second: addBook(title: "Book number two", published: 2002, author: "Some Author") {
                author { bookCount }
            }
        }
        """

        result = graphql_query(client, mutation, token=auth_token)

        assert "errors" not in result
        assert result["data"]["first"]["author"]["bookCount"] == 1
        assert result["data"]["second"]["author"]["bookCount"] == 2

    def test_add_book_for_existing_author(
        self, client: TestClient, auth_token: str, sample_author: Author
    ):
        result = add_book(
            client,
            auth_token,
            title="Clean Code",
            published=2008,
            author="Robert Martin",
            genres=["refactoring"],
        )

        assert result["data"]["addBook"]["author"]["born"] == 1952
        assert graphql_query(client, COUNTS_QUERY)["data"]["authorCount"] == 1

    def test_add_book_without_genres(self, client: TestClient, auth_token: str):
        result = add_book(
            client, auth_token, title="The Clean Coder", published=2011, author="Robert Martin"
        )

        assert "errors" not in result
        assert result["data"]["addBook"]["genres"] == []

    def test_add_duplicate_title_fails_with_invalid_args(
        self, client: TestClient, auth_token: str
    ):
        add_book(client, auth_token, **GATSBY)

        result = add_book(client, auth_token, **GATSBY)

        assert result["data"]["addBook"] is None
        error = result["errors"][0]
        assert "already exists" in error["message"]
        assert error["extensions"]["code"] == "BAD_USER_INPUT"
        assert error["extensions"]["invalidArgs"]["title"] == "Gatsby"
        assert graphql_query(client, COUNTS_QUERY)["data"]["bookCount"] == 1

    def test_add_book_short_author_name_fails(self, client: TestClient, auth_token: str):
        result = add_book(
            client, auth_token, title="Some Title", published=2000, author="Al", genres=[]
        )

        error = result["errors"][0]
        assert error["extensions"]["code"] == "BAD_USER_INPUT"
        assert error["extensions"]["invalidArgs"]["author"] == "Al"
        assert graphql_query(client, COUNTS_QUERY)["data"] == {
            "bookCount": 0,
            "authorCount": 0,
        }

    def test_add_book_requires_login(self, client: TestClient):
        result = add_book(client, None, **GATSBY)

        assert result["data"]["addBook"] is None
        assert result["errors"][0]["message"] == "Not authenticated"
        assert result["errors"][0]["extensions"]["code"] == "UNAUTHENTICATED"
        assert graphql_query(client, COUNTS_QUERY)["data"]["bookCount"] == 0

    def test_add_book_open_writes(self, open_writes: TestClient):
        result = add_book(open_writes, None, **GATSBY)

        assert "errors" not in result
        assert result["data"]["addBook"]["title"] == "Gatsby"


class TestEditAuthorMutation:
    """Tests for editAuthor."""

    def test_edit_author(self, client: TestClient, auth_token: str, sample_author: Author):
        result = graphql_query(
            client,
            EDIT_AUTHOR_MUTATION,
            variables={"name": "Robert Martin", "setBornTo": 1958},
            token=auth_token,
        )

        assert "errors" not in result
        assert result["data"]["editAuthor"] == {"name": "Robert Martin", "born": 1958}

        authors = graphql_query(client, ALL_AUTHORS_QUERY)["data"]["allAuthors"]
        assert authors[0]["born"] == 1958

    def test_edit_unknown_author_returns_null(self, client: TestClient, auth_token: str):
        result = graphql_query(
            client,
            EDIT_AUTHOR_MUTATION,
            variables={"name": "Unknown", "setBornTo": 1900},
            token=auth_token,
        )

        assert "errors" not in result
        assert result["data"]["editAuthor"] is None
        assert graphql_query(client, COUNTS_QUERY)["data"]["authorCount"] == 0

    def test_edit_author_invalid_year(
        self, client: TestClient, auth_token: str, sample_author: Author
    ):
        result = graphql_query(
            client,
            EDIT_AUTHOR_MUTATION,
            variables={"name": "Robert Martin", "setBornTo": -10},
            token=auth_token,
        )

        error = result["errors"][0]
        assert error["extensions"]["code"] == "BAD_USER_INPUT"
        assert error["extensions"]["invalidArgs"] == {
            "name": "Robert Martin",
            "setBornTo": -10,
        }

    def test_edit_author_requires_login(self, client: TestClient, sample_author: Author):
        result = graphql_query(
            client,
            EDIT_AUTHOR_MUTATION,
            variables={"name": "Robert Martin", "setBornTo": 1958},
        )

        assert result["errors"][0]["extensions"]["code"] == "UNAUTHENTICATED"
        authors = graphql_query(client, ALL_AUTHORS_QUERY)["data"]["allAuthors"]
        assert authors[0]["born"] == 1952


class TestCreateUserMutation:
    """Tests for createUser."""

    def test_create_user(self, client: TestClient):
        result = graphql_query(
            client,
            CREATE_USER_MUTATION,
            variables={"username": "alice", "password": "secret", "favouriteGenre": "crime"},
        )

        assert "errors" not in result
        user = result["data"]["createUser"]
        assert user["username"] == "alice"
        assert user["favouriteGenre"] == "crime"
        assert user["id"]

    def test_create_user_short_username(self, client: TestClient):
        result = graphql_query(
            client,
            CREATE_USER_MUTATION,
            variables={"username": "al", "password": "secret", "favouriteGenre": "crime"},
        )

        error = result["errors"][0]
        assert error["extensions"]["code"] == "BAD_USER_INPUT"
        assert error["extensions"]["invalidArgs"] == {
            "username": "al",
            "favouriteGenre": "crime",
        }

    def test_create_user_twice(self, client: TestClient):
        variables = {"username": "alice", "password": "secret", "favouriteGenre": "crime"}
        graphql_query(client, CREATE_USER_MUTATION, variables=variables)

        result = graphql_query(client, CREATE_USER_MUTATION, variables=variables)

        assert result["data"]["createUser"] is None
        assert result["errors"][0]["extensions"]["code"] == "BAD_USER_INPUT"

    def test_create_user_blank_password(self, client: TestClient):
        result = graphql_query(
            client,
            CREATE_USER_MUTATION,
            variables={"username": "alice", "password": "  ", "favouriteGenre": "crime"},
        )

        error = result["errors"][0]
        assert error["extensions"]["code"] == "BAD_USER_INPUT"
        assert "password" not in error["extensions"]["invalidArgs"]


class TestLoginMutation:
    """Tests for login."""

    def test_login_success(self, client: TestClient, sample_user: User):
        result = graphql_query(
            client,
            LOGIN_MUTATION,
            variables={"username": "mluukkai", "password": TEST_PASSWORD},
        )

        assert "errors" not in result
        assert result["data"]["login"]["value"].count(".") == 2

    def test_login_wrong_password(self, client: TestClient, sample_user: User):
        result = graphql_query(
            client,
            LOGIN_MUTATION,
            variables={"username": "mluukkai", "password": "wrongpass"},
        )

        assert result["data"]["login"] is None
        assert result["errors"][0]["message"] == "Wrong credentials"
        assert result["errors"][0]["extensions"]["code"] == "UNAUTHENTICATED"

    def test_login_unknown_user_fails_the_same_way(self, client: TestClient):
        result = graphql_query(
            client,
            LOGIN_MUTATION,
            variables={"username": "alice", "password": "wrongpass"},
        )

        assert result["data"]["login"] is None
        assert result["errors"][0]["message"] == "Wrong credentials"
        assert result["errors"][0]["extensions"]["code"] == "UNAUTHENTICATED"

    def test_create_user_login_me_round_trip(self, client: TestClient):
        graphql_query(
            client,
            CREATE_USER_MUTATION,
            variables={"username": "alice", "password": "secret", "favouriteGenre": "crime"},
        )
        login = graphql_query(
            client,
            LOGIN_MUTATION,
            variables={"username": "alice", "password": "secret"},
        )
        token = login["data"]["login"]["value"]

        result = graphql_query(client, ME_QUERY, token=token)

        assert result["data"]["me"]["username"] == "alice"
        assert result["data"]["me"]["favouriteGenre"] == "crime"

    def test_logged_in_user_can_add_book(self, client: TestClient, sample_user: User):
        login = graphql_query(
            client,
            LOGIN_MUTATION,
            variables={"username": "mluukkai", "password": TEST_PASSWORD},
        )
        token = login["data"]["login"]["value"]

        result = add_book(client, token, **GATSBY)

        assert "errors" not in result
        assert result["data"]["addBook"]["author"]["name"] == "F. Scott Fitzgerald"
