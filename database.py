"""
Database configuration module for the RapidAid red zone backend.
Handles SQLAlchemy engine setup, session management, and base model configuration.
Supports PostgreSQL (production) and SQLite via the DATABASE_URL environment variable.
"""

import os
import logging
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Load environment variables from .env file
load_dotenv()

# Get database URL from environment variable
DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    logging.error("DATABASE_URL environment variable is not set.")
    logging.error("Add DATABASE_URL to your .env file or deployment variables.")
    raise RuntimeError("DATABASE_URL is required to read accidents and store red zones.")

# SQLite connections are shared across the API worker threads
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=_connect_args)

# SessionLocal class will be used to create database sessions
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all ORM models
Base = declarative_base()


def get_db():
    """
    Dependency function that provides a database session.
    Ensures proper cleanup of database connections after each request.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
