import pytest
from sqlalchemy import func, select

from studycards.core.errors import ConflictError, InternalError, InvalidArgumentError, NotFoundError
from studycards.core.utils import generate_uuid
from studycards.models.flashcard import Flashcard
from studycards.services.flashcard_service import FlashcardService
from studycards.services.folder_service import FolderService


async def test_create_folder_trims_name(db, make_user):
    user_id = await make_user()
    folder = await FolderService(db).create_folder("  Biology  ", user_id)

    assert folder.name == "Biology"
    assert folder.created_at is not None


async def test_duplicate_name_after_trim_conflicts_but_other_owner_does_not(db, make_user):
    user_a = await make_user()
    user_b = await make_user()
    service = FolderService(db)

    await service.create_folder("Biology", user_a)
    with pytest.raises(ConflictError, match="already exists"):
        await service.create_folder(" Biology ", user_a)

    other = await service.create_folder("Biology", user_b)
    assert other.name == "Biology"


async def test_unique_constraint_is_reported_as_conflict(db, make_user, monkeypatch):
    user_id = await make_user()
    service = FolderService(db)
    await service.create_folder("Chemistry", user_id)

    calls = []

    async def racing_check(user, name, exclude_id=None):
        # the first check loses the race; later checks see the committed row
        calls.append(name)
        if len(calls) == 1:
            return False
        return await FolderService._name_taken(service, user, name, exclude_id)

    monkeypatch.setattr(service, "_name_taken", racing_check)
    with pytest.raises(ConflictError):
        await service.create_folder("Chemistry", user_id)


async def test_create_folder_for_unknown_owner_is_internal_error(db):
    with pytest.raises(InternalError):
        await FolderService(db).create_folder("Orphan", generate_uuid())


async def test_create_folder_rejects_bad_input(db, make_user):
    user_id = await make_user()
    service = FolderService(db)

    with pytest.raises(InvalidArgumentError, match="Invalid user ID format"):
        await service.create_folder("Biology", "user-1")
    with pytest.raises(InvalidArgumentError):
        await service.create_folder("   ", user_id)
    with pytest.raises(InvalidArgumentError):
        await service.create_folder("x" * 101, user_id)


async def test_list_folders_newest_first_with_pagination(db, make_user):
    user_id = await make_user()
    service = FolderService(db)
    for name in ("one", "two", "three"):
        await service.create_folder(name, user_id)

    folders, pagination = await service.get_user_folders(user_id, page=1, limit=2)
    assert [f.name for f in folders] == ["three", "two"]
    assert pagination.model_dump() == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}

    folders, pagination = await service.get_user_folders(user_id, page=5, limit=2)
    assert folders == []
    assert pagination.total == 3
    assert pagination.totalPages == 2


async def test_list_folders_for_owner_without_folders(db, make_user):
    user_id = await make_user()
    folders, pagination = await FolderService(db).get_user_folders(user_id, page=1, limit=10)

    assert folders == []
    assert pagination.total == 0
    assert pagination.totalPages == 0


async def test_list_folders_far_past_the_last_page(db, make_user):
    user_id = await make_user()
    service = FolderService(db)
    await service.create_folder("Biology", user_id)

    folders, pagination = await service.get_user_folders(user_id, page=10**19, limit=10)

    assert folders == []
    assert pagination.total == 1
    assert pagination.totalPages == 1
    assert pagination.page == 10**19


async def test_folder_details_count_and_ownership(db, make_user):
    owner = await make_user()
    stranger = await make_user()
    folders = FolderService(db)
    folder = await folders.create_folder("Biology", owner)
    await FlashcardService(db).create_flashcard("Q", "A", folder.id, "manual", owner)

    details = await folders.get_folder_details(folder.id, owner)
    assert details.flashcard_count == 1
    assert details.name == "Biology"

    with pytest.raises(NotFoundError, match="Folder not found or access denied"):
        await folders.get_folder_details(folder.id, stranger)
    with pytest.raises(NotFoundError, match="Folder not found or access denied"):
        await folders.get_folder_details(generate_uuid(), owner)


async def test_update_to_same_name_is_a_no_op(db, make_user):
    user_id = await make_user()
    service = FolderService(db)
    folder = await service.create_folder("Biology", user_id)

    unchanged = await service.update_folder(folder.id, user_id, "  Biology ")
    assert unchanged.name == "Biology"
    assert unchanged.updated_at.replace(tzinfo=None) == folder.updated_at.replace(tzinfo=None)


async def test_update_folder_renames_and_checks_other_folders(db, make_user):
    user_id = await make_user()
    service = FolderService(db)
    biology = await service.create_folder("Biology", user_id)
    await service.create_folder("Physics", user_id)

    with pytest.raises(ConflictError):
        await service.update_folder(biology.id, user_id, "Physics")

    renamed = await service.update_folder(biology.id, user_id, " Botany ")
    assert renamed.name == "Botany"
    assert renamed.id == biology.id


async def test_update_folder_not_owned(db, make_user):
    owner = await make_user()
    stranger = await make_user()
    service = FolderService(db)
    folder = await service.create_folder("Biology", owner)

    with pytest.raises(NotFoundError):
        await service.update_folder(folder.id, stranger, "Mine now")
    with pytest.raises(InvalidArgumentError):
        await service.update_folder(folder.id, owner, "")


async def test_delete_folder_cascades_to_flashcards(db, make_user):
    user_id = await make_user()
    folders = FolderService(db)
    cards = FlashcardService(db)
    folder = await folders.create_folder("Biology", user_id)
    await cards.bulk_save_flashcards(
        folder.id, [{"front": f"Q{i}", "back": f"A{i}"} for i in range(3)], user_id
    )

    await folders.delete_folder(folder.id, user_id)

    remaining = await db.scalar(select(func.count()).select_from(Flashcard).where(Flashcard.folder_id == folder.id))
    assert remaining == 0
    with pytest.raises(NotFoundError):
        await folders.get_folder_details(folder.id, user_id)


async def test_delete_folder_of_other_owner_is_not_found(db, make_user):
    owner = await make_user()
    stranger = await make_user()
    service = FolderService(db)
    folder = await service.create_folder("Biology", owner)

    with pytest.raises(NotFoundError):
        await service.delete_folder(folder.id, stranger)
    assert (await service.get_folder_details(folder.id, owner)).name == "Biology"


async def test_overview_degrades_failed_counts_to_zero(db, make_user, monkeypatch):
    user_id = await make_user()
    service = FolderService(db)
    broken = await service.create_folder("Broken", user_id)
    healthy = await service.create_folder("Healthy", user_id)
    await FlashcardService(db).create_flashcard("Q", "A", healthy.id, "manual", user_id)

    real_details = service.get_folder_details

    async def flaky_details(folder_id, owner_id):
        if folder_id == broken.id:
            raise InternalError("Failed to retrieve flashcard count from database")
        return await real_details(folder_id, owner_id)

    monkeypatch.setattr(service, "get_folder_details", flaky_details)
    overview = {f.name: f.flashcard_count for f in await service.list_folder_overview(user_id)}

    assert overview == {"Broken": 0, "Healthy": 1}
