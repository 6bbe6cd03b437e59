"""
State holder for the administration screen.

Holds which project is selected, the operator's in-progress form input,
and the permission being edited. Nothing is updated optimistically: form
fields are cleared only after the API call succeeds, and a failure keeps
the input and records the message in ``last_error``.
"""
from typing import Callable, Optional

from app.features.admin.client import ApiError, PermissionsClient
from app.utils import get_logger


log = get_logger(__name__)

Confirm = Callable[[str], bool]

DELETE_PROJECT_PROMPT = (
    "Are you sure you want to delete this project? "
    "This will delete all associated permissions and groups."
)
DELETE_GROUP_PROMPT = "Are you sure you want to delete this group?"
DELETE_PERMISSION_PROMPT = "Are you sure you want to delete this permission?"


class PermissionsViewModel:
    """
    Usage:
        vm = PermissionsViewModel(client, confirm=lambda msg: input(msg + " [y/N] ") == "y")
        vm.load_projects()
        vm.new_project_name = "Billing"
        vm.add_project()
    """

    def __init__(self, client: PermissionsClient, confirm: Confirm):
        self.client = client
        self.confirm = confirm

        self.projects: list[dict] = []
        self.selected_project_id: Optional[int] = None
        self.last_error: Optional[str] = None

        # Adding a project
        self.show_add_project = False
        self.new_project_name = ""
        self.new_project_desc = ""

        # Adding a permission / group to the selected project
        self.new_permission_key = ""
        self.new_permission_desc = ""
        self.new_group_name = ""

        # Editing a permission (at most one at a time)
        self.editing_permission_id: Optional[int] = None
        self.edit_permission_key = ""
        self.edit_permission_desc = ""

    @property
    def selected_project(self) -> Optional[dict]:
        return next((p for p in self.projects if p["id"] == self.selected_project_id), None)

    def _call(self, action: Callable[[], object]) -> bool:
        try:
            action()
        except ApiError as e:
            self.last_error = e.message
            return False
        self.last_error = None
        self.load_projects()
        return True

    def load_projects(self) -> None:
        self.projects = self.client.load_projects()

    def select_project(self, project_id: Optional[int]) -> None:
        log.debug("Selecting project %s", project_id)
        self.selected_project_id = project_id
        self.new_permission_key = ""
        self.new_permission_desc = ""
        self.new_group_name = ""
        self.cancel_edit()

    # Projects
    def add_project(self) -> bool:
        if not self.new_project_name:
            return False
        ok = self._call(lambda: self.client.add_project(self.new_project_name, self.new_project_desc))
        if ok:
            self.new_project_name = ""
            self.new_project_desc = ""
            self.show_add_project = False
        return ok

    def delete_project(self, project_id: int) -> bool:
        if not self.confirm(DELETE_PROJECT_PROMPT):
            return False
        ok = self._call(lambda: self.client.delete_project(project_id))
        if ok and self.selected_project_id == project_id:
            self.select_project(None)
        return ok

    # Permissions
    def add_permission(self) -> bool:
        if not self.new_permission_key or self.selected_project_id is None:
            return False
        project_id = self.selected_project_id
        ok = self._call(lambda: self.client.add_permission(
            project_id, self.new_permission_key, self.new_permission_desc
        ))
        if ok:
            self.new_permission_key = ""
            self.new_permission_desc = ""
        return ok

    def delete_permission(self, permission_id: int) -> bool:
        if not self.confirm(DELETE_PERMISSION_PROMPT):
            return False
        return self._call(lambda: self.client.delete_permission(permission_id))

    def start_edit(self, permission: dict) -> None:
        self.editing_permission_id = permission["id"]
        self.edit_permission_key = permission["key"]
        self.edit_permission_desc = permission.get("description") or ""

    def cancel_edit(self) -> None:
        self.editing_permission_id = None
        self.edit_permission_key = ""
        self.edit_permission_desc = ""

    def save_edit(self) -> bool:
        if self.editing_permission_id is None:
            return False
        permission_id = self.editing_permission_id
        ok = self._call(lambda: self.client.update_permission(
            permission_id, self.edit_permission_key, self.edit_permission_desc
        ))
        if ok:
            self.cancel_edit()
        return ok

    # Groups
    def add_group(self) -> bool:
        if not self.new_group_name or self.selected_project_id is None:
            return False
        project_id = self.selected_project_id
        ok = self._call(lambda: self.client.add_permission_group(project_id, self.new_group_name))
        if ok:
            self.new_group_name = ""
        return ok

    def delete_group(self, group_id: int) -> bool:
        if not self.confirm(DELETE_GROUP_PROMPT):
            return False
        return self._call(lambda: self.client.delete_permission_group(group_id))

    def toggle_group_permission(self, group_id: int, permission_id: int, enabled: bool) -> bool:
        return self._call(lambda: self.client.update_group_permission(group_id, permission_id, enabled))

    @staticmethod
    def is_permission_enabled(group: dict, permission_id: int) -> bool:
        link = next((gp for gp in group["groupPermissions"] if gp["permissionId"] == permission_id), None)
        return bool(link and link["enabled"])
