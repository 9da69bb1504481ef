from bangarang_console.errors import AuthenticationError
from bangarang_console.integrations.api import SESSION_HEADER_NAME
from bangarang_console.session import SessionStore
from bangarang_console.storage import ClientStorage


def test_login_stores_token_and_reloads(server, client, session, storage, errors):
    reloads = []
    session.on_reload(lambda: reloads.append(session.logged_in))

    session.login("admin", "secret", on_error=errors)

    assert session.logged_in
    assert session.current_token() == "tok-123"
    assert storage.get("session:token") == "tok-123"
    assert reloads == [True]
    assert errors.reported == []


def test_requests_after_login_carry_token(server, client, session):
    session.login("admin", "secret")

    client.list_incidents()

    assert server.calls[-1].headers[SESSION_HEADER_NAME] == "tok-123"


def test_failed_login_stays_logged_out(server, client, session, errors):
    reloads = []
    session.on_reload(lambda: reloads.append(True))

    session.login("admin", "nope", on_error=errors)

    assert not session.logged_in
    assert session.current_token() is None
    assert reloads == []
    assert len(errors.reported) == 1
    title, error = errors.reported[0]
    assert title == "Login"
    assert isinstance(error, AuthenticationError)
    assert len(server.calls_to("GET", "api/auth/user")) == 1


def test_logout_clears_token_and_reloads(server, client, session, storage):
    session.login("admin", "secret")
    reloads = []
    session.on_reload(lambda: reloads.append(session.logged_in))

    session.logout()

    assert not session.logged_in
    assert session.current_token() is None
    assert storage.get("session:token") is None
    assert reloads == [False]

    client.list_incidents()
    assert SESSION_HEADER_NAME not in server.calls[-1].headers


def test_session_survives_restart(tmp_path, server, client, session, executor):
    session.login("admin", "secret")

    restored = SessionStore(ClientStorage(session.storage.path), executor)

    assert restored.logged_in
    assert restored.current_token() == "tok-123"


def test_tab_selection_shares_storage(tmp_path):
    storage = ClientStorage(tmp_path / "state.json")
    storage.select_tab("conf", 2)

    assert ClientStorage(tmp_path / "state.json").selected_tab("conf") == 2
    assert storage.selected_tab("router") == 0


def test_unreadable_state_file_starts_fresh(tmp_path, executor):
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")

    session = SessionStore(ClientStorage(path), executor)

    assert not session.logged_in
