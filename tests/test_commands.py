from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from journal.models import ChatMessage, Post, Profile, Quote

from .conftest import make_profile


def run(*args):
    out = StringIO()
    call_command(*args, stdout=out)
    return out.getvalue()


def test_link_and_unlink_partners(alice, carol):
    assert 'Linked Alice and Carol' in run('link_partners', 'ALICE@example.com', 'carol@example.com')
    alice.refresh_from_db()
    carol.refresh_from_db()
    assert alice.partner == carol
    assert carol.partner == alice

    assert 'Unlinked' in run('link_partners', 'alice@example.com', 'carol@example.com', '--unlink')
    alice.refresh_from_db()
    carol.refresh_from_db()
    assert alice.partner is None
    assert carol.partner is None


def test_link_partners_errors(alice, bob, carol):
    with pytest.raises(CommandError):
        run('link_partners', 'alice@example.com', 'alice@example.com')
    with pytest.raises(CommandError):
        run('link_partners', 'alice@example.com', 'nobody@example.com')
    with pytest.raises(CommandError):
        run('link_partners', 'alice@example.com', 'carol@example.com')

    carol.refresh_from_db()
    assert carol.partner is None


def test_unlink_when_not_linked(alice, carol):
    assert 'not linked' in run('link_partners', 'alice@example.com', 'carol@example.com', '--unlink')


@pytest.mark.django_db
def test_seed_demo():
    assert 'Seeded Romeo & Juliet' in run('seed_demo')
    romeo = Profile.objects.get(name='Romeo')
    assert romeo.partner.name == 'Juliet'
    assert Post.objects.count() == 5
    assert Quote.objects.filter(owner=romeo, author=romeo.partner).count() == 1
    assert ChatMessage.objects.count() == 2

    assert 'already exist' in run('seed_demo')
    assert Post.objects.count() == 5

    run('seed_demo', '--clear')
    assert Profile.objects.count() == 2
    assert Post.objects.count() == 5


@pytest.mark.django_db
def test_seed_demo_leaves_other_users_alone():
    make_profile('someone@example.com', 'Someone')
    run('seed_demo')
    run('seed_demo', '--clear')
    assert Profile.objects.filter(name='Someone').exists()
