from studio_booking.repositories import RepositoryFactory


def test_get_or_create_returns_existing(db, studio):
    repo = RepositoryFactory.create_client_repository(db)

    created, was_created = repo.get_or_create(studio.id, "sam@example.com", "Sam")
    db.commit()
    again, created_again = repo.get_or_create(studio.id, "sam@example.com", "Other name")

    assert was_created is True
    assert created_again is False
    assert again.id == created.id
    assert again.name == "Sam"


def test_same_email_in_another_studio_is_a_new_client(db, studio, make_studio):
    other = make_studio(name="Other", email="other-studio@example.com")
    repo = RepositoryFactory.create_client_repository(db)

    first, _ = repo.get_or_create(studio.id, "sam@example.com", "Sam")
    second, created = repo.get_or_create(other.id, "sam@example.com", "Sam")

    assert created is True
    assert first.id != second.id
