from datetime import datetime, timezone
from supabase import Client
from backoffice.modules.entities.registry import EntitySpec
from backoffice.core.exceptions import BackofficeError, DatastoreError, IdentityConflict, NotFound
from typing import Any, Callable, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

_CONFLICT_MARKERS = ("already registered", "already exists", "already been registered", "email_exists")


class PrivilegedEntityMutator:
    """
    Multi-row writes behind the create/update/delete functions. Runs with the
    service-role client: identity, role row, profile row and join rows.

    create() undoes its own completed steps in reverse order when a later
    step fails. update() and delete() only guarantee ordering.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create(self, spec: EntitySpec, payload: Dict[str, Any], actor_id: Optional[str] = None) -> Dict[str, Any]:
        """Identity -> role -> profile -> join rows. Returns the profile row."""
        user_id = self._create_identity(payload["email"], payload["password"])
        undo: List[Callable[[], Any]] = [lambda: self.supabase.auth.admin.delete_user(user_id)]
        try:
            self._insert("user_roles", {
                "user_id": user_id,
                "role": spec.role,
                "assigned_by": user_id
            })
            undo.append(lambda: self._delete_where("user_roles", "user_id", user_id))

            stamp = actor_id or user_id
            row = {name: payload.get(name) for name in spec.profile_fields}
            row.update({"user_id": user_id, "created_by": stamp, "updated_by": stamp})
            profile = self._insert(spec.table, row)[0]
            undo.append(lambda: self._delete_where(spec.table, "id", profile["id"]))
            logger.info("Created %s %s for identity %s", spec.entity_type.value, profile["id"], user_id)

            for association in spec.associations:
                undo.append(lambda a=association: self._delete_where(a.table, "provider_id", profile["id"]))
                self._insert_associations(association, profile["id"], payload.get(association.payload_key) or [], stamp)
            return profile
        except Exception as e:
            self._undo(spec, undo)
            if isinstance(e, BackofficeError):
                raise
            raise DatastoreError(str(e)) from e

    def update(self, spec: EntitySpec, entity_id: str, payload: Dict[str, Any], actor_id: Optional[str] = None) -> Dict[str, Any]:
        """Update mutable profile columns, then replace every join set in full."""
        try:
            data = {name: payload[name] for name in spec.profile_fields if name in payload}
            data["updated_at"] = datetime.now(timezone.utc).isoformat()
            if actor_id:
                data["updated_by"] = actor_id
            result = self.supabase.table(spec.table)\
                .update(data)\
                .eq("id", entity_id)\
                .execute()
            if not result.data:
                raise NotFound(f"{spec.label} not found")
            profile = result.data[0]

            stamp = actor_id or profile.get("updated_by")
            for association in spec.associations:
                self._delete_where(association.table, "provider_id", entity_id)
                self._insert_associations(association, entity_id, payload.get(association.payload_key) or [], stamp)
            logger.info("Updated %s %s", spec.entity_type.value, entity_id)
            return profile
        except BackofficeError:
            raise
        except Exception as e:
            raise DatastoreError(str(e)) from e

    def delete(self, spec: EntitySpec, entity_id: str) -> bool:
        """Join rows -> profile -> role -> identity. The identity goes last."""
        try:
            result = self.supabase.table(spec.table)\
                .select("user_id")\
                .eq("id", entity_id)\
                .maybe_single()\
                .execute()
            if result is None or not result.data or not result.data.get("user_id"):
                raise NotFound(f"{spec.label} not found")
            user_id = result.data["user_id"]

            for association in spec.associations:
                self._delete_where(association.table, "provider_id", entity_id)
            self._delete_where(spec.table, "id", entity_id)
            self._delete_where("user_roles", "user_id", user_id)
            self.supabase.auth.admin.delete_user(user_id)
            logger.info("Deleted %s %s and identity %s", spec.entity_type.value, entity_id, user_id)
            return True
        except BackofficeError:
            raise
        except Exception as e:
            raise DatastoreError(str(e)) from e

    def _create_identity(self, email: str, password: str) -> str:
        try:
            response = self.supabase.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": True
            })
        except Exception as e:
            message = str(e)
            if any(marker in message.lower() for marker in _CONFLICT_MARKERS):
                raise IdentityConflict(message) from e
            raise DatastoreError(message) from e
        if not response or not response.user:
            raise DatastoreError("No user was created")
        return response.user.id

    def _insert(self, table: str, data) -> List[Dict[str, Any]]:
        result = self.supabase.table(table).insert(data).execute()
        if not result.data:
            raise DatastoreError(f"Failed to insert into {table}")
        return result.data

    def _insert_associations(self, association, provider_id: str, ids: List[str], actor_id: Optional[str]):
        if not ids:
            return
        self._insert(association.table, [
            {"provider_id": provider_id, association.column: value, "created_by": actor_id}
            for value in ids
        ])

    def _delete_where(self, table: str, column: str, value: str):
        return self.supabase.table(table).delete().eq(column, value).execute()

    def _undo(self, spec: EntitySpec, steps: List[Callable[[], Any]]):
        for step in reversed(steps):
            try:
                step()
            except Exception as e:
                logger.error("Failed to undo partial %s create: %s", spec.entity_type.value, e)
