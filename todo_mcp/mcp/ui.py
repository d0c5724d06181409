"""
UI snapshot renderer for the Todo MCP server

Renders the current records as a self-contained HTML fragment. The embedded
script never calls the server itself: every interaction is posted to the
embedding host as an intent message

    {"type": "intent", "payload": {"intent": <operation name>, "params": {...}}}

and the host is expected to translate it into the matching operation call.
"""
from html import escape
from typing import List, Sequence

from mcp.types import EmbeddedResource, TextResourceContents

from ..models.record import Record

UI_MIME_TYPE = "text/html"

INTENT_CREATE = "create_record"
INTENT_UPDATE = "update_record"
INTENT_DELETE = "delete_record"

_STYLE = """<style>
.todo-app{font-family:system-ui,-apple-system,sans-serif;max-width:640px;margin:0 auto;padding:16px;color:#1f2937}
.todo-app h2{font-size:20px;margin:0 0 12px}
.todo-form{display:flex;flex-direction:column;gap:8px;margin-bottom:16px}
.todo-form input,.todo-form textarea{border:1px solid #d1d5db;border-radius:6px;padding:8px;font:inherit}
.todo-form button{align-self:flex-end;background:#dc4c3e;color:#fff;border:0;border-radius:6px;padding:8px 16px;cursor:pointer}
.todo-section h3{font-size:14px;text-transform:uppercase;color:#6b7280;margin:16px 0 8px}
.todo-item{display:flex;align-items:flex-start;gap:10px;padding:10px 4px;border-bottom:1px solid #e5e7eb}
.todo-item.completed .todo-title{text-decoration:line-through;color:#9ca3af}
.todo-body{flex:1}
.todo-title{font-size:15px}
.todo-description{font-size:13px;color:#6b7280;margin-top:2px}
.todo-actions button{background:none;border:0;color:#9ca3af;cursor:pointer}
.todo-actions button:hover{color:#dc4c3e}
.todo-empty{text-align:center;color:#6b7280;padding:32px 0}
</style>"""

_SCRIPT = """<script>
(function () {
  function sendIntent(intent, params) {
    window.parent.postMessage({type: "intent", payload: {intent: intent, params: params}}, "*");
  }
  var form = document.getElementById("todo-create-form");
  form.addEventListener("submit", function (event) {
    event.preventDefault();
    var title = form.elements["title"].value.trim();
    if (!title) { return; }
    sendIntent("%(create)s", {title: title, description: form.elements["description"].value.trim()});
    form.reset();
  });
  document.querySelectorAll(".todo-item").forEach(function (item) {
    var id = item.getAttribute("data-id");
    item.querySelector(".todo-toggle").addEventListener("change", function (event) {
      sendIntent("%(update)s", {id: id, completed: event.target.checked});
    });
    item.querySelector(".todo-edit").addEventListener("click", function () {
      var current = item.querySelector(".todo-title").textContent;
      var title = window.prompt("Edit task", current);
      if (title === null || !title.trim()) { return; }
      sendIntent("%(update)s", {id: id, title: title.trim()});
    });
    item.querySelector(".todo-delete").addEventListener("click", function () {
      if (!window.confirm("Delete this task?")) { return; }
      sendIntent("%(delete)s", {id: id});
    });
  });
})();
</script>""" % {"create": INTENT_CREATE, "update": INTENT_UPDATE, "delete": INTENT_DELETE}


def _render_item(record: Record) -> str:
    record_id = escape(record.id, quote=True)
    css = "todo-item completed" if record.completed else "todo-item"
    checked = " checked" if record.completed else ""
    description = ""
    if record.description:
        description = f'<div class="todo-description">{escape(record.description)}</div>'
    return (
        f'<li class="{css}" data-id="{record_id}">'
        f'<input type="checkbox" class="todo-toggle" aria-label="Toggle completion"{checked}>'
        f'<div class="todo-body"><div class="todo-title">{escape(record.title)}</div>{description}</div>'
        f'<div class="todo-actions">'
        f'<button type="button" class="todo-edit" aria-label="Edit">&#9998;</button>'
        f'<button type="button" class="todo-delete" aria-label="Delete">&#10005;</button>'
        f'</div></li>'
    )


def _render_section(label: str, css: str, records: List[Record]) -> str:
    if not records:
        return ""
    items = "".join(_render_item(r) for r in records)
    return (
        f'<section class="todo-section {css}">'
        f'<h3>{label} ({len(records)})</h3>'
        f'<ul class="todo-list">{items}</ul>'
        f'</section>'
    )


def render_todo_ui(records: Sequence[Record]) -> str:
    """
    Render the interactive todo view.

    Pure function of the record listing: the same records always produce
    byte-identical output.
    """
    active = [r for r in records if not r.completed]
    completed = [r for r in records if r.completed]

    if records:
        body = (
            _render_section("Active", "todo-active", active)
            + _render_section("Completed", "todo-completed", completed)
        )
    else:
        body = '<div class="todo-empty">No tasks yet. Add one above to get started.</div>'

    return (
        '<div class="todo-app">'
        + _STYLE
        + f'<h2>Todos <span class="todo-count">{len(active)} active, {len(completed)} completed</span></h2>'
        + '<form id="todo-create-form" class="todo-form">'
        + '<input name="title" type="text" placeholder="Task name" required>'
        + '<textarea name="description" rows="2" placeholder="Description"></textarea>'
        + '<button type="submit">Add task</button>'
        + '</form>'
        + body
        + '</div>'
        + _SCRIPT
    )


def build_ui_resource(records: Sequence[Record], uri: str) -> EmbeddedResource:
    """Wrap the rendered view as an embedded UI resource content part."""
    return EmbeddedResource(
        type="resource",
        resource=TextResourceContents(
            uri=uri,
            mimeType=UI_MIME_TYPE,
            text=render_todo_ui(records),
        ),
    )
