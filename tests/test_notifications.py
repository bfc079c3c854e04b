"""
Tests for stored notifications
"""
from datetime import timedelta


def _notify(user, title='Hello', **kwargs):
    from services.notification_service import notify

    return notify(user.id, 'comment_reply', title, f'{title} message', kwargs or None)


class TestNotifications:
    def test_list_newest_first_and_unread_count(self, client, user, user_headers):
        first = _notify(user, 'First')
        second = _notify(user, 'Second', commentId=7)

        data = client.get('/api/notifications', headers=user_headers).get_json()
        assert [n['id'] for n in data['data']] == [second.id, first.id]
        assert data['data'][0]['data'] == {'commentId': 7}
        assert data['data'][0]['read'] is False
        assert data['pagination']['total'] == 2

        count = client.get('/api/notifications/unread-count', headers=user_headers).get_json()['data']
        assert count == {'count': 2}

    def test_mark_read_and_mark_all(self, client, user, user_headers):
        first = _notify(user, 'First')
        _notify(user, 'Second')
        _notify(user, 'Third')

        response = client.put(f'/api/notifications/{first.id}/read', headers=user_headers)
        assert response.status_code == 200
        assert response.get_json()['data']['read'] is True

        response = client.put('/api/notifications/mark-all-read', headers=user_headers)
        assert response.get_json()['data'] == {'updatedCount': 2}
        count = client.get('/api/notifications/unread-count', headers=user_headers).get_json()['data']
        assert count == {'count': 0}

    def test_delete(self, client, user, user_headers):
        notification = _notify(user)
        assert client.delete(f'/api/notifications/{notification.id}', headers=user_headers).status_code == 200
        assert client.delete(f'/api/notifications/{notification.id}', headers=user_headers).status_code == 404

    def test_other_users_notifications_are_hidden(self, client, user, make_user, auth_headers):
        notification = _notify(user)
        other = auth_headers(make_user('other'))

        assert client.get('/api/notifications', headers=other).get_json()['pagination']['total'] == 0
        assert client.put(f'/api/notifications/{notification.id}/read', headers=other).status_code == 404
        assert client.delete(f'/api/notifications/{notification.id}', headers=other).status_code == 404

    def test_requires_login(self, client):
        assert client.get('/api/notifications').status_code == 401
        assert client.get('/api/notifications/unread-count').status_code == 401


class TestCleanup:
    def test_removes_only_expired(self, app, user):
        from db import db
        from models import Notification
        from services.notification_service import cleanup
        from utils import now_utc

        old = _notify(user, 'Old')
        fresh = _notify(user, 'Fresh')
        old.created_at = now_utc() - timedelta(days=31)
        db.session.commit()

        assert cleanup(30) == 1
        assert [n.id for n in Notification.query.all()] == [fresh.id]

    def test_cli_command_uses_configured_retention(self, app, user):
        from db import db
        from models import Notification
        from utils import now_utc

        stale = _notify(user, 'Stale')
        stale.created_at = now_utc() - timedelta(days=app.settings.notification_retention_days + 1)
        db.session.commit()

        result = app.test_cli_runner().invoke(args=['cleanup-notifications'])
        assert result.exit_code == 0
        assert 'Deleted 1 notifications' in result.output
        assert Notification.query.count() == 0

        _notify(user, 'Recent').created_at = now_utc() - timedelta(days=3)
        db.session.commit()
        result = app.test_cli_runner().invoke(args=['cleanup-notifications', '--days', '2'])
        assert 'Deleted 1 notifications' in result.output
