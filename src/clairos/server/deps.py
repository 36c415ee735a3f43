"""Dependency definitions for the ClairOS API server."""

from __future__ import annotations

from typing import Callable, List, Optional

from fastapi import Depends, HTTPException, Request, status

from clairos.auth.sessions import SessionResolver, build_session_resolver
from clairos.config import Settings, get_settings
from clairos.db.preferences import load_preferences, save_preferences
from clairos.db.shopping import (
    add_shopping_item,
    complete_shopping_list,
    create_shopping_list,
    delete_shopping_item,
    delete_shopping_list,
    get_shopping_list,
    list_shopping_lists,
    rename_shopping_item,
    toggle_shopping_item,
    update_shopping_list,
)
from clairos.models.session import UserSession
from clairos.models.shopping import ShoppingItem, ShoppingList
from clairos.preferences import PreferencesContext
from clairos.shopping.categories import CategoryTable, get_category_table
from clairos.storage import StorageBackend, build_storage
from clairos.timers.store import TimerStore
from clairos.uploads.gateway import UploadGateway

ShoppingListsProvider = Callable[[str], List[ShoppingList]]
ShoppingListFetcher = Callable[[str], Optional[ShoppingList]]
ShoppingListCreator = Callable[[dict], ShoppingList]
ShoppingListUpdater = Callable[[str, dict], ShoppingList]
ShoppingListCompleter = Callable[[str], ShoppingList]
ShoppingListDeleter = Callable[[str], None]
ShoppingItemCreator = Callable[[str, dict], ShoppingItem]
ShoppingItemToggler = Callable[[str], ShoppingItem]
ShoppingItemRenamer = Callable[[str, str], ShoppingItem]
ShoppingItemDeleter = Callable[[str], None]
PreferencesContextFactory = Callable[[str], PreferencesContext]


def get_shopping_lists_provider() -> ShoppingListsProvider:
    return list_shopping_lists


def get_shopping_list_fetcher() -> ShoppingListFetcher:
    return get_shopping_list


def get_shopping_list_creator() -> ShoppingListCreator:
    return lambda payload: create_shopping_list(**payload)


def get_shopping_list_updater() -> ShoppingListUpdater:
    return lambda list_id, payload: update_shopping_list(list_id, **payload)


def get_shopping_list_completer() -> ShoppingListCompleter:
    return complete_shopping_list


def get_shopping_list_deleter() -> ShoppingListDeleter:
    return delete_shopping_list


def get_shopping_item_creator() -> ShoppingItemCreator:
    return lambda list_id, payload: add_shopping_item(list_id, **payload)


def get_shopping_item_toggler() -> ShoppingItemToggler:
    return toggle_shopping_item


def get_shopping_item_renamer() -> ShoppingItemRenamer:
    return rename_shopping_item


def get_shopping_item_deleter() -> ShoppingItemDeleter:
    return delete_shopping_item


def get_category_table_provider() -> CategoryTable:
    return get_category_table()


def get_preferences_context_factory() -> PreferencesContextFactory:
    def factory(user_id: str) -> PreferencesContext:
        return PreferencesContext(
            loader=lambda: load_preferences(user_id),
            saver=lambda prefs: save_preferences(user_id, prefs),
        )

    return factory


def get_session_resolver(settings: Settings = Depends(get_settings)) -> SessionResolver:
    return build_session_resolver(settings.session_cookie_name)


def get_storage(request: Request) -> StorageBackend:
    """Return the storage backend attached to the running application."""

    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        storage = build_storage(get_settings())
        request.app.state.storage = storage
    return storage


def get_upload_gateway(
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
    storage: StorageBackend = Depends(get_storage),
) -> UploadGateway:
    return UploadGateway(resolver, storage, max_bytes=settings.max_upload_bytes)


def get_timer_store(request: Request) -> TimerStore:
    return request.app.state.timer_store


def require_session(
    request: Request,
    resolver: SessionResolver = Depends(get_session_resolver),
) -> UserSession:
    """Resolve the caller's session or reject the request with 401."""

    session = resolver(request.headers)
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    request.state.user_id = session.user_id
    return session
