"""Mapped classes shared by the test suite."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class Author(Base):
    __tablename__ = "author"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(64))
    status: Mapped[Optional[str]] = mapped_column(String(16), default="active")
    rating: Mapped[Optional[int]] = mapped_column(Integer, server_default=text("0"))
    nickname: Mapped[Optional[str]] = mapped_column(String(32), info={"ignore": True})
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime)

    books: Mapped[List["Book"]] = relationship(back_populates="author")


class Book(Base):
    __tablename__ = "book"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    title: Mapped[str] = mapped_column(String(128))
    author_id: Mapped[Optional[int]] = mapped_column(ForeignKey("author.id"))
    pages: Mapped[Optional[int]] = mapped_column(Integer, default=0)
    label: Mapped[Optional[str]] = mapped_column(String(32), default=lambda: "untitled")

    author: Mapped[Optional[Author]] = relationship(back_populates="books")


class BookDeleted(Base):
    __tablename__ = "book_deleted"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    title: Mapped[str] = mapped_column(String(128))
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime)


def _slug_from_title(context) -> str:
    return context.get_current_parameters()["title"].lower()


class Article(Base):
    __tablename__ = "article"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    title: Mapped[str] = mapped_column(String(128))
    slug: Mapped[Optional[str]] = mapped_column(String(128), default=_slug_from_title)
