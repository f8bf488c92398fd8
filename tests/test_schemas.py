"""
Tests for request schemas and pagination helpers
"""

import pytest
from pydantic import ValidationError

from taskhub.core.exceptions import BadRequestError
from taskhub.schemas.auth import ChangePasswordRequest, LoginRequest
from taskhub.schemas.base import PaginationMeta, page_to_offset, parse_uuid
from taskhub.schemas.role import RoleCreateRequest, RoleFilters, RoleUpdateRequest
from taskhub.schemas.task import BulkStatusUpdateRequest, TaskCreateRequest
from taskhub.schemas.user import UserCreateRequest, UserUpdateRequest


class TestPagination:
    @pytest.mark.parametrize(
        "page,limit,total,total_pages,has_next",
        [
            (1, 10, 0, 0, False),
            (1, 10, 10, 1, False),
            (1, 10, 11, 2, True),
            (2, 10, 11, 2, False),
            (3, 5, 30, 6, True),
        ],
    )
    def test_meta(self, page, limit, total, total_pages, has_next):
        meta = PaginationMeta.create(page=page, limit=limit, total=total)

        assert meta.items_per_page == limit
        assert meta.total_pages == total_pages
        assert meta.has_next_page is has_next
        assert meta.has_prev_page is (page > 1)

    def test_meta_serializes_camel_case(self):
        meta = PaginationMeta.create(page=1, limit=2, total=3)

        assert meta.model_dump(by_alias=True) == {
            "currentPage": 1,
            "totalPages": 2,
            "totalItems": 3,
            "itemsPerPage": 2,
            "hasNextPage": True,
            "hasPrevPage": False,
        }

    def test_offset(self):
        assert page_to_offset(1, 10) == 0
        assert page_to_offset(3, 25) == 50

    def test_parse_uuid_rejects_garbage(self):
        with pytest.raises(BadRequestError, match="Invalid task ID format"):
            parse_uuid("12", "task ID")


class TestRoleSchemas:
    def test_codes_are_deduplicated_in_order(self):
        request = RoleCreateRequest(name="Ops", permissions=[3, 1, 3])

        assert request.permissions == [3, 1]
        assert request.description == ""

    def test_name_is_trimmed(self):
        assert RoleCreateRequest(name="  Ops  ", permissions=[]).name == "Ops"

    def test_update_needs_a_field(self):
        with pytest.raises(ValidationError):
            RoleUpdateRequest()

    def test_sort_field_accepts_camel_case(self):
        assert RoleFilters(sort_by="updatedAt").sort_by == "updated_at"
        with pytest.raises(ValidationError, match="Invalid sort field"):
            RoleFilters(sort_by="permissions")


class TestUserSchemas:
    def test_email_normalized(self):
        request = UserCreateRequest(name="Foo", email="Foo@Bar.com ")

        assert request.email == "foo@bar.com"

    def test_role_id_aliases(self):
        assert UserCreateRequest(name="A", email="a@example.com", role="").role_id is None
        assert UserUpdateRequest.model_validate({"roleId": None}).model_fields_set == {"role_id"}

    def test_update_tracks_only_sent_fields(self):
        request = UserUpdateRequest.model_validate({"status": "not_available"})

        assert request.model_dump(exclude_unset=True) == {"status": "not_available"}

    def test_passwords_keep_surrounding_spaces(self):
        created = UserCreateRequest(name="A", email="a@example.com", password="  abcde  ")
        changed = ChangePasswordRequest(current_password=" old ", new_password="  abcde  ")
        login = LoginRequest(email="a@example.com", password=" secret ")

        assert created.password == "  abcde  "
        assert changed.current_password == " old "
        assert changed.new_password == "  abcde  "
        assert login.password == " secret "

    def test_short_password_is_not_padded_by_spaces(self):
        with pytest.raises(ValidationError, match="at least 6 characters"):
            UserCreateRequest(name="A", email="a@example.com", password=" abc ")


class TestTaskSchemas:
    def test_missing_title(self):
        with pytest.raises(ValidationError, match="Title is required"):
            TaskCreateRequest()

    def test_subtask_gets_an_id(self):
        request = TaskCreateRequest(title="Task", description="Details", subtasks=[{"title": "Step"}])

        assert request.subtasks[0].id
        assert request.subtasks[0].completed is False

    def test_bulk_updates_required(self):
        with pytest.raises(ValidationError, match="must not be empty"):
            BulkStatusUpdateRequest(updates=[])
