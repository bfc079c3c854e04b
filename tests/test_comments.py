"""
Tests for comments
"""


class TestComments:
    def test_post_and_list(self, client, user, user_headers, make_manga):
        manga = make_manga('Mob Psycho 100')
        response = client.post(
            '/api/comments', json={'mangaId': manga.id, 'content': '  Great first arc  '}, headers=user_headers
        )
        data = response.get_json()['data']
        assert response.status_code == 201
        assert data['content'] == 'Great first arc'
        assert data['user'] == {'id': user.id, 'username': user.username}

        listing = client.get(f'/api/comments/manga/{manga.id}').get_json()
        assert listing['pagination']['total'] == 1
        assert client.get('/api/comments', headers=user_headers).get_json()['pagination']['total'] == 1

    def test_posting_is_rate_limited_per_user(self, client, make_user, auth_headers, make_manga):
        manga = make_manga('Mob Psycho 100')
        first = auth_headers(make_user('first'))
        second = auth_headers(make_user('second'))

        codes = [
            client.post('/api/comments', json={'mangaId': manga.id, 'content': f'#{i}'}, headers=first).status_code
            for i in range(3)
        ]
        assert codes == [201, 201, 429]
        # another user has their own budget
        response = client.post('/api/comments', json={'mangaId': manga.id, 'content': 'hi'}, headers=second)
        assert response.status_code == 201

    def test_sort_and_chapter_filter(self, client, user_headers, make_manga, make_chapter, app):
        from services.comment_service import create_comment
        from repositories.user_repository import UserRepository

        manga = make_manga('Mob Psycho 100')
        chapter = make_chapter(manga, 1)
        author = UserRepository.get_by_username('reader')
        older = create_comment(author.id, {'mangaId': manga.id, 'content': 'older'})
        newer = create_comment(author.id, {'mangaId': manga.id, 'content': 'newer', 'chapterId': chapter.id})

        newest_first = client.get(f'/api/comments/manga/{manga.id}').get_json()['data']
        assert [c['id'] for c in newest_first] == [newer.id, older.id]
        oldest_first = client.get(f'/api/comments/manga/{manga.id}?sort=oldest').get_json()['data']
        assert [c['id'] for c in oldest_first] == [older.id, newer.id]
        by_chapter = client.get(f'/api/comments/manga/{manga.id}?chapterId={chapter.id}').get_json()['data']
        assert [c['id'] for c in by_chapter] == [newer.id]

    def test_only_author_edits(self, client, user, user_headers, make_user, auth_headers, make_manga):
        from services.comment_service import create_comment

        manga = make_manga('Mob Psycho 100')
        comment = create_comment(user.id, {'mangaId': manga.id, 'content': 'first'})
        stranger = auth_headers(make_user('stranger'))

        assert client.put(f'/api/comments/{comment.id}', json={'content': 'x'}, headers=stranger).status_code == 404
        response = client.put(f'/api/comments/{comment.id}', json={'content': 'edited'}, headers=user_headers)
        data = response.get_json()['data']
        assert data['isEdited'] is True
        assert data['editedAt'] is not None

    def test_delete_by_author_or_admin(self, client, user, admin_headers, make_user, auth_headers, make_manga):
        from services.comment_service import create_comment

        manga = make_manga('Mob Psycho 100')
        comment = create_comment(user.id, {'mangaId': manga.id, 'content': 'first'})
        stranger = auth_headers(make_user('stranger'))

        assert client.delete(f'/api/comments/{comment.id}', headers=stranger).status_code == 403
        assert client.delete(f'/api/comments/{comment.id}', headers=admin_headers).status_code == 200
        assert client.delete(f'/api/comments/{comment.id}', headers=admin_headers).status_code == 404

    def test_validation(self, client, user_headers, make_manga):
        manga = make_manga('Mob Psycho 100')
        assert client.post('/api/comments', json={'mangaId': manga.id, 'content': '   '},
                           headers=user_headers).status_code == 400
        assert client.post('/api/comments', json={'mangaId': manga.id, 'content': 'x' * 2001},
                           headers=user_headers).status_code == 400

    def test_banned_user_cannot_post(self, client, make_user, auth_headers, make_manga):
        manga = make_manga('Mob Psycho 100')
        banned = auth_headers(make_user('troll', is_banned=True, ban_reason='spam'))
        response = client.post('/api/comments', json={'mangaId': manga.id, 'content': 'hi'}, headers=banned)
        assert response.status_code == 403

    def test_reply_notifies_parent_author(self, client, user, make_user, auth_headers, make_manga):
        from models import Notification
        from services.comment_service import create_comment

        manga = make_manga('Mob Psycho 100')
        parent = create_comment(user.id, {'mangaId': manga.id, 'content': 'first'})
        replier = make_user('replier')
        response = client.post(
            '/api/comments',
            json={'mangaId': manga.id, 'content': 'agreed', 'parentCommentId': parent.id},
            headers=auth_headers(replier),
        )
        assert response.status_code == 201

        notification = Notification.query.filter_by(user_id=user.id).one()
        assert notification.type == 'comment_reply'
        assert notification.data_json == {
            'commentId': response.get_json()['data']['id'], 'parentCommentId': parent.id, 'mangaId': manga.id
        }

        # replying to yourself stays quiet
        create_comment(user.id, {'mangaId': manga.id, 'content': 'me again', 'parentCommentId': parent.id})
        assert Notification.query.filter_by(user_id=user.id).count() == 1


class TestReactions:
    def test_like_toggle_and_switch(self, client, user, user_headers, make_manga):
        from services.comment_service import create_comment

        manga = make_manga('Mob Psycho 100')
        comment = create_comment(user.id, {'mangaId': manga.id, 'content': 'first'})
        url = f'/api/comments/{comment.id}/reactions'

        data = client.post(url, json={'reactionType': 'likes'}, headers=user_headers).get_json()['data']
        assert data == {
            'reactionCounts': {'likes': 1, 'dislikes': 0},
            'userReactions': {'likes': True, 'dislikes': False},
        }

        data = client.post(url, json={'reactionType': 'dislikes'}, headers=user_headers).get_json()['data']
        assert data['reactionCounts'] == {'likes': 0, 'dislikes': 1}
        assert data['userReactions'] == {'likes': False, 'dislikes': True}

        data = client.post(url, json={'reactionType': 'dislikes'}, headers=user_headers).get_json()['data']
        assert data['reactionCounts'] == {'likes': 0, 'dislikes': 0}
        assert data['userReactions'] == {'likes': False, 'dislikes': False}

    def test_counts_are_per_user(self, client, user, user_headers, make_user, auth_headers, make_manga):
        from services.comment_service import create_comment

        manga = make_manga('Mob Psycho 100')
        comment = create_comment(user.id, {'mangaId': manga.id, 'content': 'first'})
        url = f'/api/comments/{comment.id}/reactions'
        client.post(url, json={'reactionType': 'likes'}, headers=user_headers)
        client.post(url, json={'reactionType': 'likes'}, headers=auth_headers(make_user('other')))

        listed = client.get(f'/api/comments/manga/{manga.id}').get_json()['data'][0]
        assert listed['reactionCounts'] == {'likes': 2, 'dislikes': 0}

    def test_validation_and_access(self, client, user, user_headers, make_user, auth_headers, make_manga):
        from services.comment_service import create_comment

        manga = make_manga('Mob Psycho 100')
        comment = create_comment(user.id, {'mangaId': manga.id, 'content': 'first'})
        url = f'/api/comments/{comment.id}/reactions'

        assert client.post(url, json={'reactionType': 'love'}, headers=user_headers).status_code == 400
        assert client.post(url, json={}, headers=user_headers).status_code == 400
        assert client.post(url, json={'reactionType': 'likes'}).status_code == 401
        banned = auth_headers(make_user('troll', is_banned=True))
        assert client.post(url, json={'reactionType': 'likes'}, headers=banned).status_code == 403
        response = client.post('/api/comments/999/reactions', json={'reactionType': 'likes'}, headers=user_headers)
        assert response.status_code == 404

    def test_deleting_comment_drops_reactions(self, client, user, user_headers, make_manga):
        from models import CommentReaction
        from services.comment_service import create_comment

        manga = make_manga('Mob Psycho 100')
        comment = create_comment(user.id, {'mangaId': manga.id, 'content': 'first'})
        reply = create_comment(user.id, {'mangaId': manga.id, 'content': 'reply', 'parentCommentId': comment.id})
        client.post(f'/api/comments/{comment.id}/reactions', json={'reactionType': 'likes'}, headers=user_headers)
        client.post(f'/api/comments/{reply.id}/reactions', json={'reactionType': 'likes'}, headers=user_headers)
        assert CommentReaction.query.count() == 2

        assert client.delete(f'/api/comments/{comment.id}', headers=user_headers).status_code == 200
        assert CommentReaction.query.count() == 0
