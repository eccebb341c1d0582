"""Landing page with forms for the exercise tracker API."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["ui"])


@router.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    """Minimal UI that posts to the JSON API."""
    return HTMLResponse(_INDEX_HTML)


_INDEX_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Exercise Tracker</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      h1 { margin-bottom: 0.5rem; }
      form { margin-bottom: 1.5rem; }
      input { padding: 0.4rem 0.6rem; margin: 0.2rem 0; width: 320px; }
      button { padding: 0.4rem 0.8rem; }
      pre { background: #f6f6f6; padding: 1rem; overflow: auto; }
    </style>
  </head>
  <body>
    <h1>Exercise Tracker</h1>
    <form id="user-form">
      <h3>Create a new user</h3>
      <input name="username" placeholder="username" /><br />
      <button type="submit">Submit</button>
    </form>
    <form id="exercise-form">
      <h3>Add exercises</h3>
      <input name="userId" placeholder="user id" /><br />
      <input name="description" placeholder="description" /><br />
      <input name="duration" placeholder="duration (mins.)" /><br />
      <input name="date" placeholder="date (yyyy-mm-dd)" /><br />
      <button type="submit">Submit</button>
    </form>
    <form id="log-form">
      <h3>View a log</h3>
      <input name="userId" placeholder="user id" /><br />
      <input name="from" placeholder="from (yyyy-mm-dd)" /><br />
      <input name="to" placeholder="to (yyyy-mm-dd)" /><br />
      <input name="limit" placeholder="limit" /><br />
      <button type="submit">Submit</button>
    </form>
    <pre id="output">Ready.</pre>
    <script>
      const output = document.getElementById('output');

      async function show(res) {
        const data = await res.json();
        output.textContent = JSON.stringify(data, null, 2);
      }

      function fields(form) {
        return Object.fromEntries(new FormData(form).entries());
      }

      document.getElementById('user-form').onsubmit = async (event) => {
        event.preventDefault();
        const body = fields(event.target);
        await show(await fetch('/api/users', {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify(body)
        }));
      };

      document.getElementById('exercise-form').onsubmit = async (event) => {
        event.preventDefault();
        const { userId, ...body } = fields(event.target);
        await show(await fetch(`/api/users/${encodeURIComponent(userId)}/exercises`, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify(body)
        }));
      };

      document.getElementById('log-form').onsubmit = async (event) => {
        event.preventDefault();
        const { userId, ...query } = fields(event.target);
        const params = new URLSearchParams(
          Object.entries(query).filter(([, value]) => value)
        );
        await show(await fetch(`/api/users/${encodeURIComponent(userId)}/logs?${params}`));
      };
    </script>
  </body>
</html>
"""
