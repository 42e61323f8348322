from __future__ import annotations

import pytest

from gallery.models.user import User
from gallery.services._shared.base import BaseService
from tests.factories.user import UserFactory


@pytest.fixture()
def service():
    return BaseService()


def _new_user(username: str) -> User:
    user = User(username=username, name="Someone")
    user.password = "secret-pass"
    return user


class TestReadWriteUnitOfWork:
    def test_commit_on_clean_exit(self, service, session):
        with service.rw_uow() as uow:
            uow.users.add(_new_user("judy"))

        with service.ro_uow() as uow:
            assert uow.users.get_by_username("judy") is not None

    def test_rollback_when_block_raises(self, service, session):
        with pytest.raises(ValueError):
            with service.rw_uow() as uow:
                uow.users.add(_new_user("mallory"))
                raise ValueError("boom")

        with service.ro_uow() as uow:
            assert uow.users.get_by_username("mallory") is None

    def test_repositories_share_the_session(self, service, session):
        with service.rw_uow() as uow:
            assert uow.users.session is uow.images.session is uow.session


class TestReadOnlyUnitOfWork:
    def test_reads_are_allowed(self, service, session):
        user = UserFactory(username="niaj")
        assert user not in session.dirty

        with service.ro_uow() as uow:
            assert uow.users.get(user.id) is not None

    def test_orm_flush_is_blocked(self, service, session):
        with pytest.raises(RuntimeError, match="ORM flush blocked"):
            with service.ro_uow() as uow:
                uow.session.add(_new_user("olivia"))
                uow.session.flush()

    def test_commit_is_disallowed(self, service, session):
        with pytest.raises(RuntimeError, match="does not allow commit"):
            with service.ro_uow() as uow:
                uow.commit()

    def test_guards_removed_after_exit(self, service, session):
        with service.ro_uow():
            pass

        with service.rw_uow() as uow:
            uow.users.add(_new_user("peggy"))
