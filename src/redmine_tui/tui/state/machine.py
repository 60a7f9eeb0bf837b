"""Pure state machine for the issue browser.

transition() takes the current SessionState and one event and returns the
next state plus the effects the app must execute. Transport results come
back as events, so the machine never blocks and never performs I/O.

Staleness: every issue list request and every detail request is tagged with
a generation counter. A result whose generation is not the latest one is
dropped, and a detail result is also dropped when its issue is no longer
the selected issue.
"""

import logging
from dataclasses import replace

from redmine_tui.tui.editing.session import (
    EditSession,
    build_update_payload,
    commit_active_field,
    cycle_option,
    open_session,
    set_editor_value,
    switch_field,
)
from redmine_tui.tui.selection.logic import project_candidates, user_candidates
from redmine_tui.tui.state.effects import (
    Effect,
    FetchCurrentUser,
    FetchIssueDetail,
    FetchIssues,
    FetchPriorities,
    FetchProjects,
    FetchStatuses,
    FetchUsers,
    QuitApp,
    SubmitIssueUpdate,
)
from redmine_tui.tui.state.events import (
    Backspace,
    Cancel,
    CatalogFailed,
    CatalogKind,
    Confirm,
    CurrentUserLoaded,
    CursorDown,
    CursorEnd,
    CursorHome,
    CursorUp,
    Event,
    IssueDetailFailed,
    IssueDetailLoaded,
    IssuesFailed,
    IssuesLoaded,
    IssueUpdated,
    IssueUpdateFailed,
    NextField,
    OpenProjectPicker,
    OpenUserPicker,
    PageDown,
    PageUp,
    PreviousField,
    PrioritiesLoaded,
    ProjectsLoaded,
    Quit,
    Refresh,
    Resized,
    SaveEdit,
    Started,
    StartEdit,
    StartTextFilter,
    StatusesLoaded,
    TextInput,
    TogglePickerItem,
    ToggleScope,
    UsersLoaded,
)
from redmine_tui.tui.state.types import PickerState, SessionState
from redmine_tui.tui.views.types import IssueScope, ViewMode

logger = logging.getLogger(__name__)

Transition = tuple[SessionState, tuple[Effect, ...]]

_NO_EFFECTS: tuple[Effect, ...] = ()


def transition(state: SessionState, event: Event) -> Transition:
    """Apply one event to the session.

    Args:
        state: Current session state
        event: Operator action or transport result

    Returns:
        Tuple of (next state, effects to execute in order)
    """
    if isinstance(event, Quit):
        return state, (QuitApp(),)
    if isinstance(event, Resized):
        return replace(state, page_size=max(event.page_size, 1)), _NO_EFFECTS
    if isinstance(event, Started):
        return _start(state)

    result = _apply_result(state, event)
    if result is not None:
        return result

    if state.mode == ViewMode.BROWSE:
        return _browse(state, event)
    if state.mode == ViewMode.TEXT_FILTER_INPUT:
        return _text_filter_input(state, event)
    if state.mode in (ViewMode.USER_PICKER, ViewMode.PROJECT_PICKER):
        return _picker(state, event)
    return _edit_session(state, event)


def _start(state: SessionState) -> Transition:
    state, fetch = _refetch_issues(state)
    return state, (fetch, FetchCurrentUser())


def _refetch_issues(state: SessionState) -> tuple[SessionState, FetchIssues]:
    generation = state.issues_generation + 1
    query = state.issue_query()
    next_state = replace(
        state,
        loading=True,
        issues_generation=generation,
        last_issue_query=query,
    )
    return next_state, FetchIssues(generation=generation, query=query)


def _fetch_detail_if_changed(before: SessionState, after: SessionState) -> Transition:
    """Request the selected issue's detail when the selection moved to another issue."""
    old_issue = before.selected_issue()
    new_issue = after.selected_issue()
    if new_issue is None:
        return replace(after, detail=None), _NO_EFFECTS
    if old_issue is not None and old_issue.id == new_issue.id:
        return after, _NO_EFFECTS
    return _fetch_detail(after)


def _fetch_detail(state: SessionState) -> Transition:
    issue = state.selected_issue()
    if issue is None:
        return replace(state, detail=None), _NO_EFFECTS
    generation = state.detail_generation + 1
    detail = state.detail if state.detail is not None and state.detail.id == issue.id else None
    next_state = replace(state, detail_generation=generation, detail=detail)
    return next_state, (FetchIssueDetail(generation=generation, issue_id=issue.id),)


# Transport results


def _apply_result(state: SessionState, event: Event) -> Transition | None:
    """Handle transport result events, which are accepted in every mode.

    Returns None if the event is not a transport result.
    """
    if isinstance(event, IssuesLoaded):
        if event.generation != state.issues_generation:
            logger.debug(
                "Discarding stale issue list (generation %d, latest %d)",
                event.generation,
                state.issues_generation,
            )
            return state, _NO_EFFECTS
        loaded = replace(state, issues=event.issues, loading=False, error=None)
        total = len(loaded.filtered_issues())
        loaded = replace(loaded, selected_index=loaded.clamped_index(total))
        return _fetch_detail(loaded)

    if isinstance(event, IssuesFailed):
        if event.generation != state.issues_generation:
            return state, _NO_EFFECTS
        logger.warning("Issue fetch failed: %s", event.message)
        return replace(state, loading=False, error=event.message), _NO_EFFECTS

    if isinstance(event, IssueDetailLoaded):
        selected = state.selected_issue()
        if event.generation != state.detail_generation or (
            selected is None or selected.id != event.issue.id
        ):
            logger.debug("Discarding stale detail for issue %d", event.issue.id)
            return state, _NO_EFFECTS
        issues = tuple(event.issue if i.id == event.issue.id else i for i in state.issues)
        return replace(state, detail=event.issue, issues=issues), _NO_EFFECTS

    if isinstance(event, IssueDetailFailed):
        if event.generation != state.detail_generation:
            return state, _NO_EFFECTS
        logger.warning("Detail fetch for issue %d failed: %s", event.issue_id, event.message)
        return replace(state, error=event.message), _NO_EFFECTS

    if isinstance(event, UsersLoaded):
        next_state = replace(state, users=event.users)
        return _fill_picker(next_state, ViewMode.USER_PICKER), _NO_EFFECTS

    if isinstance(event, ProjectsLoaded):
        next_state = replace(state, projects=event.projects)
        return _fill_picker(next_state, ViewMode.PROJECT_PICKER), _NO_EFFECTS

    if isinstance(event, StatusesLoaded):
        return replace(state, statuses=event.statuses), _NO_EFFECTS

    if isinstance(event, PrioritiesLoaded):
        return replace(state, priorities=event.priorities), _NO_EFFECTS

    if isinstance(event, CurrentUserLoaded):
        return replace(state, current_user=event.user), _NO_EFFECTS

    if isinstance(event, CatalogFailed):
        return _catalog_failed(state, event), _NO_EFFECTS

    if isinstance(event, IssueUpdated):
        return _issue_updated(state, event)

    if isinstance(event, IssueUpdateFailed):
        return _issue_update_failed(state, event), _NO_EFFECTS

    return None


def _fill_picker(state: SessionState, mode: ViewMode) -> SessionState:
    """Populate a picker that is open for this catalog and still waiting on it."""
    picker = state.picker
    if picker is None or picker.mode != mode or picker.candidates is not None:
        return state
    if mode == ViewMode.USER_PICKER:
        candidates = user_candidates(state.users or ())
    else:
        candidates = project_candidates(state.projects or ())
    filled = replace(picker, candidates=candidates)
    return replace(state, picker=replace(filled, cursor=filled.selection_list().cursor))


def _catalog_failed(state: SessionState, event: CatalogFailed) -> SessionState:
    logger.warning("Fetching %s failed: %s", event.kind.name.lower(), event.message)
    next_state = replace(state, error=event.message)
    waiting_mode = {
        CatalogKind.USERS: ViewMode.USER_PICKER,
        CatalogKind.PROJECTS: ViewMode.PROJECT_PICKER,
    }.get(event.kind)
    picker = state.picker
    if picker is not None and picker.mode == waiting_mode and picker.loading:
        next_state = replace(next_state, mode=ViewMode.BROWSE, picker=None)
    return next_state


def _issue_updated(state: SessionState, event: IssueUpdated) -> Transition:
    """Close the saving session and refresh the list.

    Only the save that is still in flight closes its session. A result of a
    save whose session was discarded leaves any newer session open.
    """
    logger.info("Issue %d updated", event.issue_id)
    next_state = replace(state, notice=f"Issue #{event.issue_id} updated")
    if _is_current_save(state, event.generation):
        next_state = replace(next_state, mode=ViewMode.BROWSE, edit=None)
    # The refreshed list triggers a detail fetch of the selected issue
    next_state, fetch = _refetch_issues(next_state)
    return next_state, (fetch,)


def _issue_update_failed(state: SessionState, event: IssueUpdateFailed) -> SessionState:
    edit = state.edit
    if edit is None or not _is_current_save(state, event.generation):
        logger.warning("Discarded save of issue %d failed: %s", event.issue_id, event.message)
        return state
    logger.warning("Update of issue %d failed: %s", event.issue_id, event.message)
    return replace(state, edit=replace(edit, saving=False, error=event.message))


def _is_current_save(state: SessionState, generation: int) -> bool:
    edit = state.edit
    return generation == state.save_generation and edit is not None and edit.saving


# Browse


def _browse(state: SessionState, event: Event) -> Transition:
    if isinstance(event, (CursorUp, CursorDown, CursorHome, CursorEnd, PageUp, PageDown)):
        moved = _move_selection(state, event)
        return _fetch_detail_if_changed(state, moved)

    if isinstance(event, StartTextFilter):
        next_state = replace(
            state,
            mode=ViewMode.TEXT_FILTER_INPUT,
            filter_buffer=state.text_filter,
            notice=None,
        )
        return next_state, _NO_EFFECTS

    if isinstance(event, OpenUserPicker):
        return _open_picker(state, ViewMode.USER_PICKER)

    if isinstance(event, OpenProjectPicker):
        return _open_picker(state, ViewMode.PROJECT_PICKER)

    if isinstance(event, ToggleScope):
        scope = IssueScope.ALL if state.scope == IssueScope.MINE else IssueScope.MINE
        toggled = replace(state, scope=scope, selected_index=0, notice=None)
        return _apply_query_change(state, toggled)

    if isinstance(event, Refresh):
        next_state, fetch = _refetch_issues(replace(state, notice=None))
        return next_state, (fetch,)

    if isinstance(event, StartEdit):
        return _start_edit(state)

    return state, _NO_EFFECTS


def _move_selection(state: SessionState, event: Event) -> SessionState:
    total = len(state.filtered_issues())
    if total == 0:
        return state
    index = state.clamped_index(total)
    if isinstance(event, CursorUp):
        index -= 1
    elif isinstance(event, CursorDown):
        index += 1
    elif isinstance(event, CursorHome):
        index = 0
    elif isinstance(event, CursorEnd):
        index = total - 1
    elif isinstance(event, PageUp):
        index -= state.page_size
    elif isinstance(event, PageDown):
        index += state.page_size
    return replace(state, selected_index=min(max(index, 0), total - 1))


def _apply_query_change(before: SessionState, after: SessionState) -> Transition:
    """Refetch issues if the server query changed, otherwise re-filter locally."""
    if after.issue_query() != before.last_issue_query:
        next_state, fetch = _refetch_issues(after)
        return next_state, (fetch,)
    return _fetch_detail_if_changed(before, after)


# Text filter input


def _text_filter_input(state: SessionState, event: Event) -> Transition:
    if isinstance(event, TextInput):
        return replace(state, filter_buffer=state.filter_buffer + event.text), _NO_EFFECTS

    if isinstance(event, Backspace):
        return replace(state, filter_buffer=state.filter_buffer[:-1]), _NO_EFFECTS

    if isinstance(event, Confirm):
        confirmed = replace(
            state,
            mode=ViewMode.BROWSE,
            text_filter=state.filter_buffer,
            filter_buffer="",
            selected_index=0,
        )
        before = replace(state, mode=ViewMode.BROWSE, filter_buffer="")
        return _fetch_detail_if_changed(before, confirmed)

    if isinstance(event, Cancel):
        return replace(state, mode=ViewMode.BROWSE, filter_buffer=""), _NO_EFFECTS

    return state, _NO_EFFECTS


# Pickers


def _open_picker(state: SessionState, mode: ViewMode) -> Transition:
    if mode == ViewMode.USER_PICKER:
        catalog = state.users
        candidates = user_candidates(catalog) if catalog is not None else None
        working_ids = state.selected_user_ids
        fetch: Effect = FetchUsers()
    else:
        catalog = state.projects
        candidates = project_candidates(catalog) if catalog is not None else None
        working_ids = state.selected_project_ids
        fetch = FetchProjects()

    picker = PickerState(
        mode=mode,
        candidates=candidates,
        working_ids=working_ids,
        filter_text="",
        cursor=0,
    )
    picker = replace(picker, cursor=picker.selection_list().cursor)
    next_state = replace(state, mode=mode, picker=picker, notice=None)
    if candidates is None:
        return next_state, (fetch,)
    return next_state, _NO_EFFECTS


def _picker(state: SessionState, event: Event) -> Transition:
    picker = state.picker
    if picker is None:
        return replace(state, mode=ViewMode.BROWSE), _NO_EFFECTS

    if isinstance(event, Cancel):
        return replace(state, mode=ViewMode.BROWSE, picker=None), _NO_EFFECTS

    if isinstance(event, Confirm):
        return _apply_picker(state, picker)

    if picker.loading:
        return state, _NO_EFFECTS

    if isinstance(event, (CursorUp, CursorDown, CursorHome, CursorEnd, PageUp, PageDown)):
        moved = _move_picker_cursor(picker, event, state.page_size)
        return replace(state, picker=moved), _NO_EFFECTS

    if isinstance(event, TextInput):
        updated = replace(picker, filter_text=picker.filter_text + event.text)
        return replace(state, picker=_reclamp(updated)), _NO_EFFECTS

    if isinstance(event, Backspace):
        updated = replace(picker, filter_text=picker.filter_text[:-1])
        return replace(state, picker=_reclamp(updated)), _NO_EFFECTS

    if isinstance(event, TogglePickerItem):
        return replace(state, picker=_toggle_item(picker)), _NO_EFFECTS

    return state, _NO_EFFECTS


def _reclamp(picker: PickerState) -> PickerState:
    return replace(picker, cursor=picker.selection_list().cursor)


def _move_picker_cursor(picker: PickerState, event: Event, page_size: int) -> PickerState:
    total = len(picker.selection_list().items)
    if total == 0:
        return replace(picker, cursor=-1)
    cursor = max(picker.cursor, 0)
    if isinstance(event, CursorUp):
        cursor -= 1
    elif isinstance(event, CursorDown):
        cursor += 1
    elif isinstance(event, CursorHome):
        cursor = 0
    elif isinstance(event, CursorEnd):
        cursor = total - 1
    elif isinstance(event, PageUp):
        cursor -= page_size
    elif isinstance(event, PageDown):
        cursor += page_size
    return replace(picker, cursor=min(max(cursor, 0), total - 1))


def _toggle_item(picker: PickerState) -> PickerState:
    """Flip the working-set membership of the item under the cursor.

    The cursor position is mapped back through the list's source indices,
    since the ordered view differs from the candidate order.
    """
    listing = picker.selection_list()
    source_index = listing.source_index(listing.cursor)
    if source_index is None or picker.candidates is None:
        return picker
    candidate_id = picker.candidates[source_index].id
    if candidate_id in picker.working_ids:
        working_ids = picker.working_ids - {candidate_id}
    else:
        working_ids = picker.working_ids | {candidate_id}
    return _reclamp(replace(picker, working_ids=working_ids))


def _apply_picker(state: SessionState, picker: PickerState) -> Transition:
    applied = replace(state, mode=ViewMode.BROWSE, picker=None, selected_index=0)
    if picker.mode == ViewMode.USER_PICKER:
        applied = replace(applied, selected_user_ids=picker.working_ids)
    else:
        applied = replace(applied, selected_project_ids=picker.working_ids)
    return _apply_query_change(replace(state, mode=ViewMode.BROWSE, picker=None), applied)


# Edit session


def _start_edit(state: SessionState) -> Transition:
    issue = state.selected_issue()
    if issue is None:
        return state, _NO_EFFECTS
    if state.detail is not None and state.detail.id == issue.id:
        issue = state.detail

    effects: list[Effect] = []
    if state.statuses is None:
        effects.append(FetchStatuses())
    if state.priorities is None:
        effects.append(FetchPriorities())
    if state.users is None:
        effects.append(FetchUsers())

    next_state = replace(state, mode=ViewMode.EDIT_SESSION, edit=open_session(issue), notice=None)
    return next_state, tuple(effects)


def _edit_session(state: SessionState, event: Event) -> Transition:
    edit = state.edit
    if edit is None:
        return replace(state, mode=ViewMode.BROWSE), _NO_EFFECTS

    if isinstance(event, Cancel):
        return replace(state, mode=ViewMode.BROWSE, edit=None), _NO_EFFECTS

    # The session is frozen while its update is in flight
    if edit.saving:
        return state, _NO_EFFECTS

    catalog = state.option_catalog()

    if isinstance(event, SaveEdit):
        return _save_edit(state, edit)

    if isinstance(event, (NextField, Confirm)):
        return _with_edit(state, switch_field(edit, 1, catalog)), _NO_EFFECTS

    if isinstance(event, PreviousField):
        return _with_edit(state, switch_field(edit, -1, catalog)), _NO_EFFECTS

    if isinstance(event, CursorUp):
        return _with_edit(state, cycle_option(edit, -1, catalog)), _NO_EFFECTS

    if isinstance(event, CursorDown):
        return _with_edit(state, cycle_option(edit, 1, catalog)), _NO_EFFECTS

    if isinstance(event, TextInput):
        typed = set_editor_value(edit, edit.editor_value + event.text)
        return _with_edit(state, typed), _NO_EFFECTS

    if isinstance(event, Backspace):
        return _with_edit(state, set_editor_value(edit, edit.editor_value[:-1])), _NO_EFFECTS

    return state, _NO_EFFECTS


def _with_edit(state: SessionState, edit: EditSession) -> SessionState:
    return replace(state, edit=edit)


def _save_edit(state: SessionState, edit: EditSession) -> Transition:
    catalog = state.option_catalog()
    committed = commit_active_field(edit, catalog)
    if not committed.pending_edits:
        logger.debug("No changes to issue %d, closing edit session", edit.issue_id)
        return replace(state, mode=ViewMode.BROWSE, edit=None), _NO_EFFECTS

    payload = build_update_payload(committed, catalog)
    logger.info("Submitting update of issue %d: %s", edit.issue_id, sorted(payload))
    generation = state.save_generation + 1
    saving = replace(committed, saving=True, error=None)
    next_state = replace(state, edit=saving, save_generation=generation)
    submit = SubmitIssueUpdate(generation=generation, issue_id=edit.issue_id, fields=payload)
    return next_state, (submit,)
