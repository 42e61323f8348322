"""Factory Boy definition for :class:`gallery.models.image.Image`."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import factory

from gallery.models.image import Image
from tests.factories import BaseFactory
from tests.factories.user import UserFactory

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


class ImageFactory(BaseFactory):
    """Build persisted images; ``uploaded_at`` increases by one minute per instance."""

    class Meta:
        model = Image

    user = factory.SubFactory(UserFactory)
    user_id = factory.SelfAttribute("user.id")
    file_name = factory.Sequence(lambda n: f"photo{n}.png")
    content_type = "image/png"
    size = 1024
    public_url = factory.LazyAttribute(
        lambda o: f"https://storage.googleapis.com/test-bucket/images/{o.file_name}"
    )
    uploaded_at = factory.Sequence(lambda n: BASE_TIME + timedelta(minutes=n))
