"""todolist core library — task model, views and session engine.

Public API re-exports for convenient imports:
    from todolist import parse_task, resolve, TaskListController, ...
"""

# Models
from todolist.models import (
    Command,
    Focus,
    PaneState,
    RemoteImportSettings,
    Settings,
    Snapshot,
    Task,
    TaskRow,
)

# Errors
from todolist.errors import (
    EmptyPane,
    ImportFailure,
    NoSelection,
    ParseFailure,
    PersistenceFailure,
    TodoListError,
)

# todo.txt format
from todolist.todotxt import (
    parse_collection,
    parse_task,
    serialize_collection,
    serialize_task,
)

# Tag index & views
from todolist.tags import contexts, projects
from todolist.view import matches, resolve, resolve_indices

# Session
from todolist.navigation import FOCUS_ORDER, Navigator
from todolist.controller import TaskListController

# Workspace & adapters
from todolist.workspace import (
    config_path,
    get_user_timezone,
    load_settings,
    today,
    todo_path,
    workspace_root,
)
from todolist.storage import load_collection, save_collection
from todolist.importer import RemoteImporter, import_remote_tasks
from todolist.bootstrap import build_controller, ensure_workspace, merge_remote

__version__ = "0.1.0"
