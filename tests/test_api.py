"""
Tests for API endpoints
"""


class TestHealthEndpoint:
    """Tests for health check endpoint"""

    def test_health_returns_healthy(self, client):
        response = client.get('/api/system/health')
        data = response.get_json()

        assert response.status_code == 200
        assert data['data']['status'] == 'healthy'
        assert data['data']['database'] == 'ok'
        assert data['data']['catalog'] == {'manga': 0, 'chapters': 0}

    def test_metrics_exposed(self, client, make_manga):
        make_manga('Blame!')
        client.get('/api/manga/search?q=blame')
        response = client.get('/metrics')
        body = response.get_data(as_text=True)
        assert response.status_code == 200
        assert 'mangashelf_search_requests_total' in body
        assert 'mangashelf_manga_total 1.0' in body


class TestSearchEndpoint:
    def test_search_envelope(self, client, make_manga):
        make_manga('One Piece', genres=['Adventure'])
        make_manga('One Punch Man')
        make_manga('Piece of Cake')

        response = client.get('/api/manga/search?q=one piece')
        data = response.get_json()['data']

        assert response.status_code == 200
        assert data['items'][0]['title'] == 'One Piece'
        assert data['items'][0]['genres'] == ['Adventure']
        assert set(data) >= {
            'items', 'page', 'limit', 'totalPages', 'totalMatches', 'truncated', 'poolSize', 'usedFallback'
        }
        assert data['limit'] == 20
        assert data['truncated'] is False

    def test_missing_query_is_400(self, client):
        response = client.get('/api/manga/search')
        assert response.status_code == 400
        assert response.get_json()['code'] == 'VALIDATION_ERROR'

    def test_bad_page_is_400(self, client):
        assert client.get('/api/manga/search?q=x&page=0').status_code == 400

    def test_limit_is_clamped(self, client, make_manga):
        make_manga('Akira')
        data = client.get('/api/manga/search?q=akira&limit=500').get_json()['data']
        assert data['limit'] == 50

    def test_list_delegates_to_search(self, client, make_manga):
        make_manga('Akira')
        make_manga('Bakuman')
        data = client.get('/api/manga?search=akira').get_json()['data']
        assert [m['title'] for m in data['items']] == ['Akira']


class TestMangaEndpoints:
    def test_list_filters_and_paginates(self, client, make_manga):
        make_manga('Old Action', genres=['Action'], days_ago=20)
        make_manga('New Action', genres=['Action'], days_ago=1, status='Completed')
        make_manga('Romance Only', genres=['Romance'])

        data = client.get('/api/manga?genre=action&limit=1').get_json()
        assert [m['title'] for m in data['data']] == ['New Action']
        assert data['pagination']['total'] == 2
        assert data['pagination']['has_more'] is True

        data = client.get('/api/manga?status=completed').get_json()
        assert [m['title'] for m in data['data']] == ['New Action']

        data = client.get('/api/manga/genre/Romance').get_json()
        assert [m['title'] for m in data['data']] == ['Romance Only']

    def test_non_ascii_genre_filter(self, client, make_manga):
        from urllib.parse import quote

        make_manga('Dr. Stone', genres=['Shōnen', 'Sci-Fi'])
        make_manga('Nana', genres=['Josei'])

        data = client.get('/api/manga', query_string={'genre': 'Shōnen'}).get_json()
        assert [m['title'] for m in data['data']] == ['Dr. Stone']
        assert data['data'][0]['genres'] == ['Shōnen', 'Sci-Fi']

        data = client.get('/api/manga/genre/' + quote('shōnen')).get_json()
        assert [m['title'] for m in data['data']] == ['Dr. Stone']

    def test_detail_increments_views_unless_skipped(self, client, make_manga, make_chapter, reload):
        manga = make_manga('Dandadan')
        make_chapter(manga, 2, title='Second')
        make_chapter(manga, 1, title='First')

        data = client.get(f'/api/manga/{manga.id}').get_json()['data']
        assert [c['chapterNumber'] for c in data['chapters']] == [1, 2]
        assert reload(manga).views == 1

        client.get(f'/api/manga/{manga.id}?skipIncrement=true')
        assert reload(manga).views == 1

        client.get(f'/api/manga/slug/{manga.slug}')
        assert reload(manga).views == 2

    def test_unknown_manga(self, client):
        assert client.get('/api/manga/999').status_code == 404
        assert client.get('/api/manga/slug/nothing-here').status_code == 404

    def test_admin_create_update_delete(self, client, admin_headers):
        payload = {
            'title': 'Chainsaw Man',
            'coverImage': 'covers/csm.jpg',
            'status': 'ongoing',
            'genres': ['Action', 'Horror'],
            'alternativeTitles': ['Chensō Man'],
        }
        response = client.post('/api/manga', json=payload, headers=admin_headers)
        created = response.get_json()['data']
        assert response.status_code == 201
        assert created['slug'] == 'chainsaw-man'
        assert created['status'] == 'Ongoing'
        assert created['description'] == 'No description available.'
        assert created['alternativeTitles'] == ['Chensō Man']

        again = client.post('/api/manga', json=payload, headers=admin_headers).get_json()['data']
        assert again['slug'] == 'chainsaw-man-1'

        response = client.put(
            f"/api/manga/{created['id']}", json={'status': 'Hiatus'}, headers=admin_headers
        )
        assert response.get_json()['data']['status'] == 'Hiatus'

        assert client.delete(f"/api/manga/{created['id']}", headers=admin_headers).status_code == 200
        assert client.get(f"/api/manga/{created['id']}").status_code == 404

    def test_create_validation(self, client, admin_headers):
        response = client.post('/api/manga', json={'title': 'No Cover'}, headers=admin_headers)
        assert response.status_code == 400
        response = client.post(
            '/api/manga', json={'title': 'X', 'coverImage': 'c.jpg', 'status': 'paused'}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_writes_require_admin(self, client, user_headers):
        payload = {'title': 'X', 'coverImage': 'c.jpg'}
        assert client.post('/api/manga', json=payload).status_code == 401
        assert client.post('/api/manga', json=payload, headers=user_headers).status_code == 403

    def test_delete_cascades(self, client, admin_headers, user, make_manga, make_chapter):
        from models import Bookmark, Chapter, Rating
        from services.rating_service import submit_rating

        manga = make_manga('Gantz')
        make_chapter(manga, 1)
        submit_rating(user.id, {'mangaId': manga.id, 'rating': 3})

        client.delete(f'/api/manga/{manga.id}', headers=admin_headers)
        assert Chapter.query.count() == 0
        assert Rating.query.count() == 0
        assert Bookmark.query.count() == 0


class TestChapterEndpoints:
    def test_create_updates_manga_stats(self, client, admin_headers, make_manga, reload):
        manga = make_manga('Frieren', days_ago=30)
        before = reload(manga).last_updated

        response = client.post(
            '/api/chapters',
            json={'mangaId': manga.id, 'chapterNumber': 1, 'title': 'Journey', 'pages': ['p1.jpg', 'p2.jpg']},
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert response.get_json()['data']['pages'][1] == {'pageNumber': 2, 'imageUrl': 'p2.jpg'}
        manga = reload(manga)
        assert manga.total_chapters == 1
        assert manga.last_updated > before

        duplicate = client.post(
            '/api/chapters', json={'mangaId': manga.id, 'chapterNumber': 1}, headers=admin_headers
        )
        assert duplicate.status_code == 409

    def test_delete_decrements_total(self, client, admin_headers, make_manga, reload):
        manga = make_manga('Frieren')
        chapter_id = client.post(
            '/api/chapters', json={'mangaId': manga.id, 'chapterNumber': 1}, headers=admin_headers
        ).get_json()['data']['id']

        assert client.delete(f'/api/chapters/{chapter_id}', headers=admin_headers).status_code == 200
        assert reload(manga).total_chapters == 0

    def test_list_sort_and_detail_views(self, client, make_manga, make_chapter, reload):
        manga = make_manga('Frieren')
        first = make_chapter(manga, 1)
        make_chapter(manga, 2.5)

        data = client.get(f'/api/chapters/manga/{manga.id}?order=desc').get_json()['data']
        assert [c['chapterNumber'] for c in data] == [2.5, 1]

        client.get(f'/api/chapters/{first.id}')
        assert reload(first).views == 1

        latest = client.get('/api/chapters/latest?limit=1').get_json()['data']
        assert len(latest) == 1
        assert latest[0]['manga']['title'] == 'Frieren'


class TestDiscovery:
    def test_genres_sorted_by_count(self, client, make_manga):
        make_manga('A', genres=['Action', 'Drama'])
        make_manga('B', genres=['Action'])
        data = client.get('/api/genres').get_json()['data']
        assert [(g['name'], g['count']) for g in data] == [('Action', 2), ('Drama', 1)]

    def test_top_rated_falls_back_to_recent(self, client, make_manga, user):
        from services.rating_service import submit_rating

        make_manga('Older', days_ago=10)
        newer = make_manga('Newer', days_ago=1)
        data = client.get('/api/trending/top-rated').get_json()['data']
        assert [m['title'] for m in data] == ['Newer', 'Older']

        submit_rating(user.id, {'mangaId': newer.id, 'rating': 5})
        data = client.get('/api/trending/top-rated').get_json()['data']
        assert [m['title'] for m in data] == ['Newer']

    def test_recent_and_latest_chapters(self, client, make_manga, make_chapter):
        manga = make_manga('Kaiju No. 8', days_ago=0)
        make_manga('Older', days_ago=5)
        make_chapter(manga, 1)
        assert client.get('/api/trending/recent?limit=1').get_json()['data'][0]['title'] == 'Kaiju No. 8'
        chapters = client.get('/api/trending/latest-chapters').get_json()['data']
        assert chapters[0]['manga']['slug'] == manga.slug

    def test_genre_detail_by_slug(self, client, make_manga):
        make_manga('A', genres=['Sci-Fi', 'Drama'])
        make_manga('B', genres=['Sci-Fi'])

        listed = client.get('/api/genres').get_json()['data'][0]
        assert listed['slug'] == 'sci-fi'

        data = client.get('/api/genres/SCI-FI').get_json()['data']
        assert data == {'name': 'Sci-Fi', 'displayName': 'Sci-Fi', 'slug': 'sci-fi', 'mangaCount': 2}
        assert client.get('/api/genres/western').status_code == 404

    def test_manga_for_genre(self, client, make_manga):
        make_manga('Old', genres=['Slice of Life'], days_ago=9)
        make_manga('New', genres=['slice of life'], days_ago=1)
        make_manga('Other', genres=['Drama'])

        data = client.get('/api/genres/slice-of-life/manga').get_json()
        assert [m['title'] for m in data['data']] == ['New', 'Old']
        assert data['pagination']['total'] == 2
        assert client.get('/api/genres/western/manga').get_json()['data'] == []

    def test_recent_with_chapters(self, client, make_manga, make_chapter):
        fresh = make_manga('Fresh', days_ago=0)
        make_manga('Stale', days_ago=5)
        for number in (1, 2, 3, 4):
            make_chapter(fresh, number)

        data = client.get('/api/trending/recent-with-chapters').get_json()
        assert data['pagination']['per_page'] == 15
        first, second = data['data']
        assert first['title'] == 'Fresh'
        assert [c['chapterNumber'] for c in first['latestChapters']] == [4, 3, 2]
        assert second['latestChapters'] == []

        data = client.get('/api/trending/recent-with-chapters?limit=1&page=2').get_json()
        assert [m['title'] for m in data['data']] == ['Stale']


class TestApplicationFactory:
    def test_engine_keeps_non_ascii_json(self, app):
        from db import json_serializer

        assert app.config['SQLALCHEMY_ENGINE_OPTIONS']['json_serializer'] is json_serializer
        assert json_serializer(['Shōnen']) == '["Shōnen"]'

    def test_module_docstrings_are_english_ascii(self):
        import ast
        import pathlib

        app_dir = pathlib.Path(__file__).resolve().parent.parent / 'app'
        for path in app_dir.rglob('*.py'):
            doc = ast.get_docstring(ast.parse(path.read_text(encoding='utf-8'))) or ''
            assert doc.isascii(), path.name
