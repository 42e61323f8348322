from __future__ import annotations

import pytest

from gallery.models.image import Image
from tests.factories.image import ImageFactory
from tests.factories.user import UserFactory


def test_image_belongs_to_user(session):
    user = UserFactory()
    image = ImageFactory(user=user)

    assert image.user_id == user.id
    assert image.user is user
    assert image in user.images


def test_negative_size_rejected():
    with pytest.raises(ValueError, match="size"):
        Image(
            file_name="a.png",
            content_type="image/png",
            size=-1,
            public_url="https://example.invalid/a.png",
            user_id="u",
        )


def test_uploaded_at_defaults_to_now(session):
    user = UserFactory()
    image = Image(
        file_name="b.png",
        content_type="image/png",
        size=0,
        public_url="https://example.invalid/b.png",
        user_id=user.id,
    )
    session.add(image)
    session.flush()

    assert image.uploaded_at is not None
    assert image.id
