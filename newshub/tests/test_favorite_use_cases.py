from __future__ import annotations

import pytest

from newshub.application.use_cases.favorites.add_favorite import \
    AddFavoriteUseCase
from newshub.application.use_cases.favorites.list_favorites import \
    ListFavoritesUseCase
from newshub.application.use_cases.favorites.remove_favorite import \
    RemoveFavoriteUseCase
from newshub.domain.favorites.entities import (ArticleSnapshot, FavoriteQuery,
                                               FavoriteSort)
from newshub.domain.favorites.exceptions import (AlreadyFavoritedError,
                                                 FavoriteNotFoundError)
from newshub.domain.users.entities import AuthContext

from .fakes import InMemoryFavoriteRepository

ALICE = AuthContext(user_id="user-1", name="Alice", email="alice@example.com")
BOB = AuthContext(user_id="user-2", name="Bob", email="bob@example.com")


@pytest.fixture()
def favorites() -> InMemoryFavoriteRepository:
    return InMemoryFavoriteRepository()


def test_add_favorite_returns_new_row(favorites: InMemoryFavoriteRepository) -> None:
    favorite = AddFavoriteUseCase(favorites=favorites).execute(
        ALICE, ArticleSnapshot(url="https://news.example/a", title="A")
    )

    assert favorite.user_id == ALICE.user_id
    assert favorite.title == "A"


def test_add_duplicate_reports_existing_id(favorites: InMemoryFavoriteRepository) -> None:
    use_case = AddFavoriteUseCase(favorites=favorites)
    first = use_case.execute(ALICE, ArticleSnapshot(url="https://news.example/a"))

    with pytest.raises(AlreadyFavoritedError) as exc_info:
        use_case.execute(ALICE, ArticleSnapshot(url="https://news.example/a", title="again"))

    assert exc_info.value.favorite_id == first.id
    assert exc_info.value.to_dict()["error"]["id"] == first.id
    assert exc_info.value.status == 409


def test_same_url_for_different_users_is_allowed(favorites: InMemoryFavoriteRepository) -> None:
    use_case = AddFavoriteUseCase(favorites=favorites)

    mine = use_case.execute(ALICE, ArticleSnapshot(url="https://news.example/a"))
    theirs = use_case.execute(BOB, ArticleSnapshot(url="https://news.example/a"))

    assert mine.id != theirs.id


def test_list_favorites_pages(favorites: InMemoryFavoriteRepository) -> None:
    add = AddFavoriteUseCase(favorites=favorites)
    for i in range(15):
        add.execute(ALICE, ArticleSnapshot(url=f"https://news.example/{i}"))
    add.execute(BOB, ArticleSnapshot(url="https://news.example/bob"))

    page = ListFavoritesUseCase(favorites=favorites).execute(
        ALICE, FavoriteQuery(page=2, page_size=12, sort_by=FavoriteSort.ADDED_AT)
    )

    assert page.total == 15
    assert len(page.items) == 3
    assert (page.page, page.page_size) == (2, 12)
    assert all(item.user_id == ALICE.user_id for item in page.items)


def test_remove_foreign_favorite_is_not_found(favorites: InMemoryFavoriteRepository) -> None:
    favorite = AddFavoriteUseCase(favorites=favorites).execute(
        ALICE, ArticleSnapshot(url="https://news.example/a")
    )
    remove = RemoveFavoriteUseCase(favorites=favorites)

    with pytest.raises(FavoriteNotFoundError):
        remove.execute(BOB, favorite.id)

    remove.execute(ALICE, favorite.id)
    with pytest.raises(FavoriteNotFoundError):
        remove.execute(ALICE, favorite.id)
