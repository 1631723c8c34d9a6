"""Tests for DepartmentManager (apps/departments/services.py)"""

import pytest
from django.contrib import messages

from apps.departments.services import (
    DELETE_PROMPT, INITIAL_DEPARTMENT, SESSION_KEY, DepartmentManager, SubmitResult,
)


def confirm_yes(prompt):
    return True


def confirm_no(prompt):
    return False


class TestRefresh:

    def test_replaces_list(self, manager, fake_client):
        fake_client.departments.append({'id': 9, 'name': 'Legal', 'code': 'LEG'})

        assert manager.refresh() is True
        assert [d['id'] for d in manager.departments] == [1, 2, 3, 9]

    def test_failure_keeps_previous_list_and_notifies(self, manager, fake_client, notices):
        fake_client.fail('list', 'API down')

        assert manager.refresh() is False
        assert len(manager.departments) == 3
        assert notices == [(messages.ERROR, 'API down')]

    def test_failure_without_server_message_uses_fallback(self, manager, fake_client, notices):
        fake_client.fail('list')

        manager.refresh()

        assert notices == [(messages.ERROR, 'Failed to load departments.')]


class TestSearch:

    def test_empty_term_shows_everything(self, manager):
        manager.set_search_term('')
        assert manager.visible_departments == manager.departments

    def test_case_insensitive_name_match(self, manager):
        manager.set_search_term('FIN')
        assert [d['name'] for d in manager.visible_departments] == ['Finance']

    def test_substring_match(self, manager):
        manager.set_search_term('an')
        assert [d['name'] for d in manager.visible_departments] == ['Human Resources', 'Finance']

    def test_code_is_not_searched(self, manager):
        manager.set_search_term('HR')
        assert manager.visible_departments == []

    def test_search_never_touches_list(self, manager, fake_client):
        manager.set_search_term('zzz')
        assert manager.visible_departments == []
        assert len(manager.departments) == 3
        assert fake_client.calls == []

    def test_none_term(self, manager):
        manager.set_search_term(None)
        assert manager.search_term == ''


class TestCreate:

    def test_begin_create_resets_draft_and_errors(self, manager):
        manager.create_draft = {'name': 'Ops', 'code': ''}
        manager.errors = {'code': 'Department code is required.'}

        manager.begin_create()

        assert manager.create_draft == INITIAL_DEPARTMENT
        assert manager.errors == {}

    def test_name_digits_are_stripped(self, manager):
        manager.update_create_field('name', 'Sales2')
        assert manager.create_draft['name'] == 'Sales'

    def test_code_is_stored_verbatim(self, manager):
        manager.update_create_field('code', ' s4l ')
        assert manager.create_draft['code'] == ' s4l '

    def test_unknown_field_rejected(self, manager):
        with pytest.raises(ValueError):
            manager.update_create_field('id', 5)

    def test_invalid_draft_makes_no_remote_call(self, manager, fake_client):
        manager.update_create_field('name', 'Sales2')

        result = manager.submit_create()

        assert result == SubmitResult(succeeded=False, close_dialog=False)
        assert manager.errors == {'code': 'Department code is required.'}
        assert fake_client.calls == []
        assert manager.busy is False
        assert fake_client.busy_seen == []

    def test_success(self, manager, fake_client, notices):
        manager.update_create_field('name', 'Legal')
        manager.update_create_field('code', 'LEG')

        result = manager.submit_create()

        assert result == SubmitResult(succeeded=True, close_dialog=True)
        assert manager.create_draft == INITIAL_DEPARTMENT
        assert len(manager.departments) == 4
        assert fake_client.operations() == ['create', 'list']
        assert notices == [(messages.SUCCESS, 'Department created')]
        assert manager.errors == {}
        assert manager.busy is False
        assert fake_client.busy_seen == [True]

    def test_failure_keeps_draft(self, manager, fake_client, notices):
        fake_client.fail('create', 'Code already used', 409)
        manager.update_create_field('name', 'Legal')
        manager.update_create_field('code', 'ENG')

        result = manager.submit_create()

        assert result.close_dialog is False
        assert manager.create_draft == {'name': 'Legal', 'code': 'ENG'}
        assert notices == [(messages.ERROR, 'Code already used')]
        assert fake_client.operations() == ['create']
        assert manager.busy is False
        assert fake_client.busy_seen == [True]

    def test_name_with_null_character_is_not_blank(self, manager, fake_client):
        manager.update_create_field('name', 'Sales\x00')
        manager.update_create_field('code', 'SAL')

        result = manager.submit_create()

        assert result.succeeded is True
        assert fake_client.calls[0] == ('create', {'name': 'Sales\x00', 'code': 'SAL'})

    def test_non_ascii_digits_are_kept(self, manager):
        manager.update_create_field('name', 'Sales\u0663')
        assert manager.create_draft['name'] == 'Sales\u0663'

    def test_failure_fallback_message(self, manager, fake_client, notices):
        fake_client.fail('create')
        manager.update_create_field('name', 'Legal')
        manager.update_create_field('code', 'LEG')

        manager.submit_create()

        assert notices == [(messages.ERROR, 'Failed to add the department.')]

    def test_passing_submit_clears_stale_errors(self, manager):
        manager.submit_create()
        assert manager.errors

        manager.update_create_field('name', 'Legal')
        manager.update_create_field('code', 'LEG')
        manager.submit_create()

        assert manager.errors == {}

    def test_dismiss_resets_draft(self, manager):
        manager.update_create_field('name', 'Legal')
        manager.dismiss_create()
        assert manager.create_draft == INITIAL_DEPARTMENT


class TestEdit:

    def test_begin_edit_copies_department(self, manager):
        department = manager.departments[0]

        manager.begin_edit(department)
        manager.update_edit_field('name', 'Platform')

        assert manager.edit_draft == {'id': 1, 'name': 'Platform', 'code': 'ENG'}
        assert department['name'] == 'Engineering'

    def test_begin_edit_clears_errors(self, manager):
        manager.errors = {'name': 'Department name is required.'}
        manager.begin_edit(manager.departments[0])
        assert manager.errors == {}

    def test_edit_field_strips_digits(self, manager):
        manager.begin_edit(manager.departments[0])
        manager.update_edit_field('name', 'Eng1neering')
        assert manager.edit_draft['name'] == 'Engneering'

    def test_submit_without_draft_is_noop(self, manager, fake_client):
        manager.errors = {'code': 'stale'}

        result = manager.submit_edit()

        assert result.succeeded is False
        assert fake_client.calls == []
        assert manager.errors == {'code': 'stale'}

    def test_submit_without_id_is_noop(self, manager, fake_client):
        manager.edit_draft = {'name': '', 'code': ''}

        result = manager.submit_edit()

        assert result.close_dialog is False
        assert fake_client.calls == []
        assert manager.edit_draft == {'name': '', 'code': ''}
        assert manager.errors == {}

    def test_invalid_edit(self, manager, fake_client):
        manager.begin_edit(manager.departments[1])
        manager.update_edit_field('code', '')

        result = manager.submit_edit()

        assert result.succeeded is False
        assert manager.errors == {'code': 'Department code is required.'}
        assert fake_client.calls == []
        assert fake_client.busy_seen == []

    def test_success(self, manager, fake_client, notices):
        manager.begin_edit(manager.departments[1])
        manager.update_edit_field('name', 'People')

        result = manager.submit_edit()

        assert result == SubmitResult(succeeded=True, close_dialog=True)
        assert manager.edit_draft is None
        assert fake_client.operations() == ['update', 'list']
        assert fake_client.calls[0] == ('update', 2, {'id': 2, 'name': 'People', 'code': 'HR'})
        assert manager.get_department(2)['name'] == 'People'
        assert notices == [(messages.SUCCESS, 'Department updated')]
        assert fake_client.busy_seen == [True]
        assert manager.busy is False

    def test_failure_keeps_draft(self, manager, fake_client, notices):
        fake_client.fail('update')
        manager.begin_edit(manager.departments[1])
        manager.update_edit_field('name', 'People')

        result = manager.submit_edit()

        assert result.close_dialog is False
        assert manager.edit_draft['name'] == 'People'
        assert manager.get_department(2)['name'] == 'Human Resources'
        assert notices == [(messages.ERROR, 'Failed to update the department.')]
        assert manager.busy is False
        assert fake_client.busy_seen == [True]

    def test_dismiss_discards_draft(self, manager):
        manager.begin_edit(manager.departments[0])
        manager.dismiss_edit()
        assert manager.edit_draft is None


class TestDelete:

    def test_declined_is_noop(self, manager, fake_client):
        assert manager.delete(1, confirm=confirm_no) is False
        assert fake_client.calls == []
        assert fake_client.busy_seen == []
        assert len(manager.departments) == 3

    def test_prompt_is_passed_to_confirm(self, manager):
        prompts = []
        manager.delete(1, confirm=lambda prompt: prompts.append(prompt) or False)
        assert prompts == [DELETE_PROMPT]

    def test_confirmed_refreshes_once(self, manager, fake_client, notices):
        assert manager.delete(1, confirm=confirm_yes) is True

        assert fake_client.operations() == ['delete', 'list']
        assert manager.get_department(1) is None
        assert notices == [(messages.SUCCESS, 'Department deleted')]
        assert manager.busy is False
        assert fake_client.busy_seen == [True]

    def test_failure(self, manager, fake_client, notices):
        fake_client.fail('delete', 'Department has employees', 409)

        assert manager.delete(1, confirm=confirm_yes) is False

        assert fake_client.operations() == ['delete']
        assert len(manager.departments) == 3
        assert notices == [(messages.ERROR, 'Department has employees')]
        assert manager.busy is False
        assert fake_client.busy_seen == [True]


class TestLookup:

    def test_get_department_matches_string_ids(self, manager):
        assert manager.get_department('2')['code'] == 'HR'

    def test_get_department_missing(self, manager):
        assert manager.get_department(42) is None


class TestSessionState:

    def test_round_trip(self, manager, fake_client):
        session = {}
        manager.set_search_term('fin')
        manager.update_create_field('name', 'Legal')
        manager.begin_edit(manager.departments[0])
        manager.save(session)

        restored = DepartmentManager.from_session(session, fake_client)

        assert restored.departments == manager.departments
        assert restored.create_draft == {'name': 'Legal', 'code': ''}
        assert restored.edit_draft == {'id': 1, 'name': 'Engineering', 'code': 'ENG'}
        assert restored.search_term == 'fin'
        assert restored.busy is False

    def test_empty_session(self, fake_client):
        restored = DepartmentManager.from_session({}, fake_client)

        assert restored.departments == []
        assert restored.create_draft == INITIAL_DEPARTMENT
        assert restored.edit_draft is None
        assert restored.errors == {}

    def test_saved_under_session_key(self, manager):
        session = {}
        manager.save(session)
        assert set(session[SESSION_KEY]) == {
            'departments', 'create_draft', 'edit_draft', 'errors', 'search_term', 'busy',
        }
