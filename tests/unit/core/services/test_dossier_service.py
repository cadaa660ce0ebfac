"""DossierService: folders of the owner's own documents."""

import pytest

from notus.core.errors import NotFoundError, ValidationError
from notus.core.repositories.document_repository import DocumentRepository
from notus.core.services.dossier_service import DossierService


@pytest.fixture
def dossiers(test_session):
    return DossierService(test_session)


async def test_create_requires_a_name(dossiers, owner):
    assert isinstance((await dossiers.create_dossier(owner.id, "   ")).error, ValidationError)
    created = await dossiers.create_dossier(owner.id, " Travail ")
    assert created.data.name == "Travail"


async def test_add_only_own_documents_and_ignore_duplicates(dossiers, owner, make_user, make_document):
    mine = await make_document(owner, "Mine")
    other_owner = await make_user("bob@example.com")
    theirs = await make_document(other_owner, "Theirs")
    dossier = (await dossiers.create_dossier(owner.id, "Travail")).data

    assert (await dossiers.add_documents(owner.id, dossier.id, [mine.id, theirs.id])).data == 1
    assert (await dossiers.add_documents(owner.id, dossier.id, [mine.id])).data == 0
    assert isinstance((await dossiers.add_documents(owner.id, dossier.id, [theirs.id])).error, ValidationError)
    assert isinstance((await dossiers.add_documents(owner.id, dossier.id, [])).error, ValidationError)

    detail = (await dossiers.get_dossier(owner.id, dossier.id)).data
    assert [d.id for d in detail.documents] == [mine.id]


async def test_other_users_cannot_see_dossier(dossiers, owner, make_user):
    bob = await make_user("bob@example.com")
    dossier = (await dossiers.create_dossier(owner.id, "Travail")).data

    assert isinstance((await dossiers.get_dossier(bob.id, dossier.id)).error, NotFoundError)
    assert isinstance((await dossiers.rename_dossier(bob.id, dossier.id, "X")).error, NotFoundError)
    assert isinstance((await dossiers.delete_dossier(bob.id, dossier.id)).error, NotFoundError)
    assert await dossiers.list_dossiers(bob.id) == []


async def test_rename_list_and_delete_keep_documents(dossiers, owner, document, test_session):
    dossier = (await dossiers.create_dossier(owner.id, "Travail")).data
    await dossiers.add_documents(owner.id, dossier.id, [document.id])

    renamed = await dossiers.rename_dossier(owner.id, dossier.id, "Perso")
    assert renamed.data.name == "Perso"

    [summary] = await dossiers.list_dossiers(owner.id)
    assert summary.document_count == 1

    assert (await dossiers.remove_documents(owner.id, dossier.id, [document.id])).data == 1
    assert (await dossiers.delete_dossier(owner.id, dossier.id)).success
    assert await dossiers.list_dossiers(owner.id) == []

    assert await DocumentRepository(test_session).get_by_id(document.id) is not None
