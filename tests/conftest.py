"""Shared fixtures: two linked partners (Alice & Bob) and a solo user (Carol)."""

from datetime import datetime, timezone as dt_timezone

import pytest
from django.contrib.auth import get_user_model

from journal.identity import Identity
from journal.models import Profile

PASSWORD = 'correct-horse-battery-staple-42'


@pytest.fixture(autouse=True)
def plain_http(settings):
    settings.SECURE_SSL_REDIRECT = False


def make_profile(email, name):
    user = get_user_model().objects.create_user(username=email, email=email, password=PASSWORD)
    return Profile.objects.create(user=user, name=name)


@pytest.fixture
def alice(db):
    return make_profile('alice@example.com', 'Alice')


@pytest.fixture
def bob(db, alice):
    bob = make_profile('bob@example.com', 'Bob')
    alice.link(bob)
    alice.refresh_from_db()
    bob.refresh_from_db()
    return bob


@pytest.fixture
def carol(db):
    return make_profile('carol@example.com', 'Carol')


@pytest.fixture
def alice_id(alice, bob):
    return Identity(me=alice, partner=bob)


@pytest.fixture
def bob_id(alice, bob):
    return Identity(me=bob, partner=alice)


@pytest.fixture
def carol_id(carol):
    return Identity(me=carol)


@pytest.fixture
def fixed_now():
    return datetime(2024, 6, 15, 12, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def alice_client(client, alice, bob):
    client.force_login(alice.user)
    return client
