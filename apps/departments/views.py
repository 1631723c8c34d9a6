"""
Views for departments app.

Includes:
- Department list view (view activation: reloads the list)
- Department table partial (live search)
- Department create / edit views (modal forms)
- Draft field view (strips digits from the name as it is typed)
- Department delete view (confirmation prompt)

All views are staff-only. HTMX requests get partials; plain requests follow
post/redirect/get.
"""

from django.contrib import messages
from django.contrib.auth.decorators import login_required, user_passes_test
from django.http import Http404, HttpResponse, HttpResponseBadRequest
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils.http import urlencode
from django.views.decorators.http import require_http_methods, require_POST
from django_htmx.http import reswap, retarget, trigger_client_event

from .clients import DepartmentServiceClient
from .forms import DepartmentForm, DepartmentSearchForm
from .services import DELETE_PROMPT, DRAFT_FIELDS, DepartmentManager

DRAFT_KINDS = ('create', 'edit')


def staff_required(view_func):
    """Decorator to require a staff user."""
    def check_staff(user):
        return user.is_authenticated and user.is_staff

    decorated_view = user_passes_test(check_staff, login_url='login')(view_func)
    return decorated_view


# =============================================================================
# Helpers
# =============================================================================

def _get_manager(request):
    """Restore the department manager from the session, wired to this request."""
    def notify(level, message):
        messages.add_message(request, level, message)

    return DepartmentManager.from_session(
        request.session,
        DepartmentServiceClient.from_settings(),
        notify=notify,
    )


def _find_department(manager, pk):
    """Look a department up, reloading the list once if it is not there."""
    department = manager.get_department(pk)
    if department is None and manager.refresh():
        department = manager.get_department(pk)
    if department is None:
        raise Http404('Department not found.')
    return department


def _table_context(manager):
    return {
        'departments': manager.visible_departments,
        'visible_count': len(manager.visible_departments),
        'total_count': len(manager.departments),
        'search': manager.search_term,
        'busy': manager.busy,
    }


def _form_context(manager, is_edit):
    kind = 'edit' if is_edit else 'create'
    draft = manager.edit_draft if is_edit else manager.create_draft
    form = DepartmentForm(
        initial=draft or {},
        field_url=reverse('departments:department_field', kwargs={'kind': kind}),
        field_errors=manager.errors,
    )

    if is_edit:
        submit_url = reverse('departments:department_edit', kwargs={'pk': draft['id']})
        dismiss_url = reverse('departments:department_edit_dismiss')
        title = f"Edit Department: {draft.get('name', '')}"
    else:
        submit_url = reverse('departments:department_create')
        dismiss_url = reverse('departments:department_create_dismiss')
        title = 'Add Department'

    return {
        'form': form,
        'errors': manager.errors,
        'is_edit': is_edit,
        'department': draft,
        'title': title,
        'submit_url': submit_url,
        'dismiss_url': dismiss_url,
        'busy': manager.busy,
    }


def _render_form(request, manager, is_edit):
    context = _form_context(manager, is_edit)
    if request.htmx:
        return render(request, 'departments/partials/department_form.html', context)
    return render(request, 'departments/department_form.html', context)


def _after_change(request, manager):
    """
    Respond once a dialog is done: the refreshed table for HTMX (swapped
    into the page, with a closeModal event), a redirect otherwise.
    """
    if not request.htmx:
        return redirect('departments:department_list')

    response = render(request, 'departments/partials/department_table.html', _table_context(manager))
    response = retarget(response, '#department-table')
    response = reswap(response, 'outerHTML')
    return trigger_client_event(response, 'closeModal', {})


# =============================================================================
# List & Search
# =============================================================================

@login_required
@staff_required
def department_list_view(request):
    """
    List all departments.
    Loads the list from the Department API on every visit.
    """
    manager = _get_manager(request)
    manager.refresh()
    manager.set_search_term(request.GET.get('search', ''))
    manager.save(request.session)

    context = _table_context(manager)
    context['search_form'] = DepartmentSearchForm(
        initial={'search': manager.search_term},
        table_url=reverse('departments:department_table'),
    )
    return render(request, 'departments/department_list.html', context)


@login_required
@staff_required
def department_table_view(request):
    """Filter the loaded list by name. No API call."""
    manager = _get_manager(request)
    manager.set_search_term(request.GET.get('search', ''))
    manager.save(request.session)

    if request.htmx:
        return render(request, 'departments/partials/department_table.html', _table_context(manager))
    return redirect(f"{reverse('departments:department_list')}?{urlencode({'search': manager.search_term})}")


# =============================================================================
# Create
# =============================================================================

@login_required
@staff_required
@require_http_methods(['GET', 'POST'])
def department_create_view(request):
    """
    Create a new department.
    GET opens an empty form, POST submits it.
    """
    manager = _get_manager(request)

    if request.method == 'POST':
        for field in DRAFT_FIELDS:
            if field in request.POST:
                manager.update_create_field(field, request.POST[field])
        result = manager.submit_create()
        manager.save(request.session)
        if result.close_dialog:
            return _after_change(request, manager)
    else:
        manager.begin_create()
        manager.save(request.session)

    return _render_form(request, manager, is_edit=False)


@login_required
@staff_required
@require_POST
def department_create_dismiss_view(request):
    """Close the create dialog and reset its draft."""
    manager = _get_manager(request)
    manager.dismiss_create()
    manager.save(request.session)

    if request.htmx:
        return HttpResponse('')
    return redirect('departments:department_list')


# =============================================================================
# Edit
# =============================================================================

@login_required
@staff_required
@require_http_methods(['GET', 'POST'])
def department_edit_view(request, pk):
    """
    Edit an existing department.
    GET copies it into the edit draft, POST submits the draft.
    """
    manager = _get_manager(request)

    if request.method == 'POST':
        if manager.edit_draft is not None:
            if str(manager.edit_draft.get('id')) != str(pk):
                return HttpResponseBadRequest('Edit draft does not match this department.')
            for field in DRAFT_FIELDS:
                if field in request.POST:
                    manager.update_edit_field(field, request.POST[field])

        result = manager.submit_edit()
        manager.save(request.session)
        if result.close_dialog or manager.edit_draft is None:
            return _after_change(request, manager)
        return _render_form(request, manager, is_edit=True)

    manager.begin_edit(_find_department(manager, pk))
    manager.save(request.session)
    return _render_form(request, manager, is_edit=True)


@login_required
@staff_required
@require_POST
def department_edit_dismiss_view(request):
    """Close the edit dialog and discard its draft."""
    manager = _get_manager(request)
    manager.dismiss_edit()
    manager.save(request.session)

    if request.htmx:
        return HttpResponse('')
    return redirect('departments:department_list')


# =============================================================================
# Draft Field Updates
# =============================================================================

@login_required
@staff_required
@require_POST
def department_field_view(request, kind):
    """
    Store one draft field and return its re-rendered input (HTMX endpoint).
    The name comes back with its digits removed.
    """
    if kind not in DRAFT_KINDS:
        raise Http404('Unknown draft.')

    field = next((f for f in DRAFT_FIELDS if f in request.POST), None)
    if field is None:
        return HttpResponseBadRequest('No department field given.')

    manager = _get_manager(request)
    if kind == 'edit' and manager.edit_draft is None:
        return HttpResponseBadRequest('No department is being edited.')

    if kind == 'edit':
        manager.update_edit_field(field, request.POST[field])
        draft = manager.edit_draft
    else:
        manager.update_create_field(field, request.POST[field])
        draft = manager.create_draft
    manager.save(request.session)

    form = DepartmentForm(
        initial=draft,
        field_url=reverse('departments:department_field', kwargs={'kind': kind}),
        field_errors=manager.errors,
    )
    return HttpResponse(str(form[field]))


# =============================================================================
# Delete
# =============================================================================

@login_required
@staff_required
@require_http_methods(['GET', 'POST'])
def department_delete_view(request, pk):
    """
    Delete a department.
    GET asks for confirmation, POST deletes only when confirm=yes.
    """
    manager = _get_manager(request)

    if request.method == 'POST':
        manager.delete(pk, confirm=lambda prompt: request.POST.get('confirm') == 'yes')
        manager.save(request.session)
        return _after_change(request, manager)

    department = _find_department(manager, pk)
    manager.save(request.session)

    context = {
        'department': department,
        'prompt': DELETE_PROMPT,
        'busy': manager.busy,
    }
    if request.htmx:
        return render(request, 'departments/partials/department_delete.html', context)
    return render(request, 'departments/department_confirm_delete.html', context)
