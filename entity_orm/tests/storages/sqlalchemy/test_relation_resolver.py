import typing
from datetime import date

import pytest
from sqlalchemy.engine import Connection

from entity_orm.entity import Entity, Identity, many_to_one, one_to_many
from entity_orm.errors import HydrationError
from entity_orm.registry import Registry
from entity_orm.storages.sqlalchemy import SqlAlchemyOrmManager
from entity_orm.storages.sqlalchemy.populating_entity.visitor import hydrate
from entity_orm.storages.sqlalchemy.resolving_relations.resolver import RelationResolver


class Author(Entity):
    id: Identity[int]
    name: typing.Optional[str] = None
    books: typing.List["Book"] = one_to_many(mapped_by="author_id")


class Book(Entity):
    id: Identity[int]
    name: typing.Optional[str] = None
    date_of_writing: typing.Optional[date] = None
    author: typing.Optional[Author] = many_to_one("author_id")


class Employee(Entity):
    id: Identity[int]
    name: typing.Optional[str] = None
    manager: typing.Optional["Employee"] = many_to_one("manager_id")
    reports: typing.List["Employee"] = one_to_many(mapped_by="manager_id")


@pytest.fixture()
def library(orm: SqlAlchemyOrmManager) -> SqlAlchemyOrmManager:
    orm.prepare_repository_for(Author)
    orm.prepare_repository_for(Book)
    author = Author("Yan")
    orm.save(author)
    orm.save(Book("Sumerki", date(2020, 1, 1), author))
    orm.save(Book("Surviver", date(2021, 1, 1), author))
    return orm


def test_row_hydrates_to_one_instance_per_read(library: SqlAlchemyOrmManager) -> None:
    author = library.get_by_id(Author, 1)

    assert len(author.books) == 2
    assert all(book.author is author for book in author.books)


def test_books_of_one_author_share_author_instance(library: SqlAlchemyOrmManager) -> None:
    first, second = library.get_all(Book)

    assert first.author is second.author
    assert first.author.books == [first, second]
    assert first.author.books[0] is first


def test_separate_reads_return_distinct_instances(library: SqlAlchemyOrmManager) -> None:
    assert library.get_by_id(Author, 1) is not library.get_by_id(Author, 1)


def test_self_referencing_relation_terminates(orm: SqlAlchemyOrmManager) -> None:
    orm.prepare_repository_for(Employee)
    boss = Employee("Ann")
    orm.save(boss)
    worker = Employee("Bob", boss)
    orm.save(worker)

    fetched = orm.get_by_id(Employee, worker.id)

    assert fetched.manager.name == "Ann"
    assert fetched.manager.manager is None
    assert fetched.manager.reports == [fetched]
    assert fetched.manager.reports[0] is fetched
    assert fetched.reports == []


def test_resolver_fetches_relations_of_every_instance_once(
    library: SqlAlchemyOrmManager, connection: Connection
) -> None:
    executed: typing.List[typing.Any] = []

    def execute(statement: typing.Any, params: typing.Any = None) -> typing.Any:
        executed.append(statement)
        return connection.execute(statement, params)

    resolver = RelationResolver(execute, library.registry)
    author = resolver.hydrate(Author, {"id": 1, "name": "Yan"})
    resolver.resolve()

    # books of the author, then the author of each book
    assert len(executed) == 3
    assert [book.name for book in author.books] == ["Sumerki", "Surviver"]


def test_hydrate_copies_and_coerces_columns():
    descriptor = Registry().descriptor_for(Book)

    book = hydrate(descriptor, {"id": 3, "name": "Harry Potter", "date_of_writing": "2021-05-04"})

    assert book == Book("Harry Potter", date(2021, 5, 4), id=3)


def test_hydrate_fails_on_missing_column():
    descriptor = Registry().descriptor_for(Book)

    with pytest.raises(HydrationError) as exc_info:
        hydrate(descriptor, {"id": 3, "name": "Harry Potter"})

    assert "date_of_writing" in exc_info.value.message
