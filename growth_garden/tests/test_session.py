from growth_garden.core.localization import Translator, translate
from growth_garden.core.session_manager import GardenSession, SessionManager


def test_clear_token_drops_user_and_cache():
    session = GardenSession(token="abc")
    session.user = object()
    session.cache.set(("goals",), [])
    session.clear_token()
    assert session.token is None
    assert session.user is None
    assert len(session.cache) == 0
    assert not session.is_authenticated


def test_capture_oauth_token():
    session = GardenSession()
    assert session.capture_oauth_token("https://garden.example/?token=t0k3n&state=x") == "t0k3n"
    assert session.token == "t0k3n"
    assert session.capture_oauth_token("https://garden.example/dashboard") is None
    assert session.token == "t0k3n"


def test_language_validation():
    session = GardenSession(language="zh")
    assert session.language == "zh"
    assert session.set_language("fr") is False
    assert session.language == "zh"


def test_session_manager_reuses_sessions_per_token():
    manager = SessionManager()
    first = manager.get_session("abc")
    assert manager.get_session("abc", language="zh") is first
    assert first.language == "zh"
    assert manager.get_session("other") is not first
    assert len(manager) == 2


def test_anonymous_sessions_are_not_shared():
    manager = SessionManager()
    assert manager.get_session(None) is not manager.get_session(None)
    assert len(manager) == 0


def test_end_session():
    manager = SessionManager()
    session = manager.get_session("abc")
    manager.end_session("abc")
    assert session.token is None
    assert len(manager) == 0


def test_translator_follows_session_language():
    session = GardenSession(language="en")
    translator = Translator(session)
    assert translator.t("stats.activeGoals") == "Active Goals"
    session.set_language("zh")
    assert translator.t("stats.activeGoals") == "活跃目标"


def test_translation_fallbacks():
    assert translate("goals.status.needsWater", "zh", hours=5) == "5小时内需要浇水"
    assert translate("no.such.key", "zh") == "no.such.key"
    assert translate("stats.activeGoals", "fr") == "Active Goals"


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_registry_is_capped_least_recently_used_first():
    manager = SessionManager(max_sessions=3)
    first = manager.get_session("t0")
    for i in range(1, 1000):
        manager.get_session(f"t{i}")
    assert len(manager) == 3
    assert manager.get_session("t0") is not first


def test_recently_used_session_survives_the_cap():
    manager = SessionManager(max_sessions=2)
    kept = manager.get_session("a")
    manager.get_session("b")
    manager.get_session("a")
    manager.get_session("c")
    assert manager.get_session("a") is kept
    assert len(manager) == 2


def test_idle_sessions_expire():
    clock = FakeClock()
    manager = SessionManager(idle_ttl_seconds=60, clock=clock)
    idle = manager.get_session("idle")
    clock.now = 30
    active = manager.get_session("active")
    clock.now = 75
    assert manager.get_session("active") is active
    assert len(manager) == 1
    assert manager.get_session("idle") is not idle


def test_sign_out_leaves_the_registry():
    manager = SessionManager()
    session = manager.get_session("abc")
    session.clear_token()
    assert len(manager) == 0
    fresh = manager.get_session("abc")
    assert fresh is not session
    assert fresh.token == "abc"


def test_stale_sign_out_does_not_drop_newer_session():
    manager = SessionManager()
    old = manager.get_session("abc")
    manager.end_session("abc")
    newer = manager.get_session("abc")
    old.clear_token()
    assert manager.get_session("abc") is newer
