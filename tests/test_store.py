from prompt_ab.models import AbTestExperiment
from prompt_ab.selection import assign_variant
from prompt_ab.store import AssignmentStore, assignment_key


def experiment(exp_id="exp-1", variants=None):
    return AbTestExperiment(
        id=exp_id,
        variants=variants or [{"id": "control"}, {"id": "variant-a"}],
    )


def test_assignment_key_format():
    assert assignment_key("sess", "exp") == "sess:exp"


def test_first_access_computes_and_stores(logger):
    store = AssignmentStore(logger=logger)
    exp = experiment()

    assert store.lookup("sess-1", exp.id) is None
    variant = store.get_or_assign("sess-1", exp)

    assert variant.id == assign_variant("sess-1", exp.id, exp.variants).id
    assert store.lookup("sess-1", exp.id) is variant
    assert "sess-1:exp-1" in store
    assert len(store) == 1


def test_repeated_access_returns_cached_value(logger):
    store = AssignmentStore(logger=logger)
    exp = experiment()

    first = store.get_or_assign("sess-1", exp)
    for _ in range(5):
        assert store.get_or_assign("sess-1", exp) is first

    assert len(store) == 1
    logger.debug.assert_called_once()
    message = logger.debug.call_args.args[0]
    assert "session=sess-1" in message
    assert "experiment=exp-1" in message
    assert f"variant={first.id}" in message


def test_cached_value_is_authoritative(logger):
    store = AssignmentStore(logger=logger)
    original = experiment(variants=[{"id": "only-original"}])
    changed = experiment(variants=[{"id": "only-changed"}])

    store.get_or_assign("sess-1", original)
    assert store.get_or_assign("sess-1", changed).id == "only-original"


def test_lookup_never_assigns(logger):
    store = AssignmentStore(logger=logger)
    assert store.lookup("sess-1", "exp-1") is None
    assert len(store) == 0
    logger.debug.assert_not_called()


def test_keys_are_per_session_and_experiment(logger):
    store = AssignmentStore(logger=logger)
    store.get_or_assign("sess-1", experiment("exp-1"))
    store.get_or_assign("sess-1", experiment("exp-2"))
    store.get_or_assign("sess-2", experiment("exp-1"))
    assert len(store) == 3


def test_instances_do_not_share_state(logger):
    first = AssignmentStore(logger=logger)
    second = AssignmentStore(logger=logger)
    first.get_or_assign("sess-1", experiment())
    assert second.lookup("sess-1", "exp-1") is None
