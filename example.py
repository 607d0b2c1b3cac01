import typing
from datetime import date

from entity_orm import Entity, Identity, many_to_one, one_to_many
from entity_orm.config import Settings, create_engine
from entity_orm.storages.sqlalchemy import SqlAlchemyOrmManager


class Author(Entity):
    id: Identity[int]
    name: typing.Optional[str] = None
    books: typing.List["Book"] = one_to_many(mapped_by="author_id")


class Book(Entity):
    id: Identity[int]
    name: typing.Optional[str] = None
    genre: typing.Optional[str] = None
    date_of_writing: typing.Optional[date] = None
    author: typing.Optional[Author] = many_to_one("author_id")


engine = create_engine(Settings.from_env())

with engine.connect() as connection:
    orm = SqlAlchemyOrmManager(connection)
    orm.prepare_repository_for(Author)
    orm.prepare_repository_for(Book)

    yan = Author("Yan")
    mark = Author("Mark")
    orm.save(yan)
    orm.save(mark)

    orm.save(Book("Sumerki", "Love", date.today(), yan))
    orm.save(Book("Surviver", "Adventures", date.today(), yan))
    orm.save(Book("Harry Potter"))
    connection.commit()

    print("all authors:", orm.get_all(Author))
    print("all books:", orm.get_all(Book))
    print(orm.get_by_id(Author, yan.id).books)
    print(orm.get_by_id(Author, mark.id).books)
    print(orm.get_by_id(Book, 3))

    orm.print(Author)
    orm.print(Book)
