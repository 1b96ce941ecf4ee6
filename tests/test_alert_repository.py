from components.alert.repository import AlertRepository
from tests.conftest import make_user


async def _user_with_alerts(session):
    user = await make_user(session)
    repo = AlertRepository(session)
    repo.add(user.id, "high_cost", "High cost", "Over threshold", "warning")
    repo.add(user.id, "prediction_generated", "Prediction", "Annual cost", "info")
    await session.commit()
    return user, repo


def test_mark_read_and_unread_filter(run_db):
    async def body(session):
        user, repo = await _user_with_alerts(session)
        first = (await repo.get_for_user(user.id))[0]

        assert (await repo.mark_read(user.id, first.id)).is_read
        assert await repo.unread_count(user.id) == 1
        unread = await repo.get_for_user(user.id, unread_only=True)
        assert [a.alert_type for a in unread] == ["high_cost"]

    run_db(body)


def test_mark_all_read(run_db):
    async def body(session):
        user, repo = await _user_with_alerts(session)
        assert await repo.mark_all_read(user.id) == 2
        assert await repo.unread_count(user.id) == 0
        assert await repo.mark_all_read(user.id) == 0

    run_db(body)


def test_alerts_are_scoped_to_owner(run_db):
    async def body(session):
        user, repo = await _user_with_alerts(session)
        other = await make_user(session, email="other@example.com")
        alert = (await repo.get_for_user(user.id))[0]

        assert await repo.mark_read(other.id, alert.id) is None
        assert not await repo.delete(other.id, alert.id)
        assert await repo.delete(user.id, alert.id)
        assert len(await repo.get_for_user(user.id)) == 1

    run_db(body)
