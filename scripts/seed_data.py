#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with a sample catalog for development.

USAGE:
    # Make sure you're in the project root with venv activated
    python scripts/seed_data.py

This script:
1. Connects to the database using the application settings
2. Drops and recreates the tables (optional)
3. Adds sample books through the entity store, which creates the
   authors on first reference exactly like the addBook mutation
4. Creates two demo users who are friends with each other
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from library_api.config import get_settings
from library_api.database import Database
from library_api.models import Book, User
from library_api.services.security import hash_password
from library_api.services.store import EntityStore

BOOKS = [
    {"title": "Clean Code", "published": 2008, "author": "Robert Martin",
     "genres": ["refactoring"]},
    {"title": "Agile software development", "published": 2002, "author": "Robert Martin",
     "genres": ["agile", "patterns", "design"]},
    {"title": "Refactoring, edition 2", "published": 2018, "author": "Martin Fowler",
     "genres": ["refactoring"]},
    {"title": "Refactoring to patterns", "published": 2008, "author": "Joshua Kerievsky",
     "genres": ["refactoring", "patterns"]},
    {"title": "Practical Object-Oriented Design, An Agile Primer Using Ruby",
     "published": 2012, "author": "Sandi Metz", "genres": ["refactoring", "design"]},
    {"title": "Crime and punishment", "published": 1866, "author": "Fyodor Dostoevsky",
     "genres": ["classic", "crime"]},
    {"title": "The Demon", "published": 1872, "author": "Fyodor Dostoevsky",
     "genres": ["classic", "revolution"]},
]

BIRTH_YEARS = {
    "Robert Martin": 1952,
    "Martin Fowler": 1963,
    "Fyodor Dostoevsky": 1821,
}

USERS = [
    {"username": "mluukkai", "favourite_genre": "refactoring", "password": "salainen"},
    {"username": "hellas", "favourite_genre": "classic", "password": "salainen"},
]


def create_books(store: EntityStore) -> list[Book]:
    """Add sample books, creating authors on first reference."""
    print("Creating books...")
    books = []
    for data in BOOKS:
        author, created = store.find_or_create_author(data["author"])
        if created:
            print(f"  + author {author.name}")
        books.append(
            store.create_book(data["title"], data["published"], author, data["genres"])
        )

    for name, year in BIRTH_YEARS.items():
        store.update_author_born(name, year)

    print(f"Created {len(books)} books.")
    return books


def create_users(store: EntityStore) -> list[User]:
    """Create demo users and make them friends."""
    print("Creating users...")
    users = [
        store.create_user(
            username=data["username"],
            favourite_genre=data["favourite_genre"],
            password_hash=hash_password(data["password"]),
        )
        for data in USERS
    ]

    first, second = users
    first.friends.append(second)
    second.friends.append(first)
    store.db.commit()

    print(f"Created {len(users)} users.")
    return users


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, drops every table and recreates it empty.
    """
    settings = get_settings()

    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    database = Database.from_settings(settings)
    if clear_existing:
        print("Dropping existing tables...")
        database.drop_tables()
    database.create_tables()
    db = database.session()

    try:
        store = EntityStore(db)
        books = create_books(store)
        users = create_users(store)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Authors: {store.count_authors()}")
        print(f"  - Books: {len(books)}")
        print(f"  - Users: {len(users)} (password: salainen)")
        print(f"\nGraphQL endpoint at http://localhost:{settings.port}/graphql")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    seed_database()
