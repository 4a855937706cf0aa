import json

from jetsetgo.models import Feedback, User, Content
from jetsetgo.models.enums import UserRole, ContentStatus

VALID_FEEDBACK = {
    'name': 'Jane Doe',
    'email': 'jane@example.com',
    'subject': 'Great service',
    'message': 'Booking was quick and easy.',
    'rating': 5
}


class TestHealth:

    def test_health(self, client):
        response = client.get('/api/health')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['status'] == 'ok'
        assert data['amadeus'] == 'configured'

    def test_health_without_credentials(self, app, client):
        app.config['AMADEUS_API_SECRET'] = None

        data = json.loads(client.get('/api/health').data)
        assert data['status'] == 'ok'
        assert data['amadeus'] == 'missing'

    def test_unknown_route_uses_envelope(self, client):
        response = client.get('/api/nowhere')

        assert response.status_code == 404
        assert json.loads(response.data)['success'] is False


class TestFeedback:

    def test_submit_anonymous(self, client, db):
        response = client.post('/api/feedback', json=VALID_FEEDBACK)

        assert response.status_code == 201
        data = json.loads(response.data)
        assert data['message'] == 'Thank you for your feedback!'
        feedback = db.session.get(Feedback, data['data']['id'])
        assert feedback.user_id is None
        assert feedback.rating == 5

    def test_submit_links_signed_in_user(self, client, sample_user, auth_headers):
        response = client.post('/api/feedback', headers=auth_headers, json=VALID_FEEDBACK)

        assert response.status_code == 201
        assert Feedback.query.first().user_id == sample_user.id

    def test_rating_range(self, client):
        for rating in (0, 6, 'great'):
            response = client.post('/api/feedback', json=dict(VALID_FEEDBACK, rating=rating))
            assert response.status_code == 422
            assert 'rating' in json.loads(response.data)['errors']

    def test_fractional_rating_is_rejected(self, client):
        for rating in ('4.5', 4.7):
            response = client.post('/api/feedback', json=dict(VALID_FEEDBACK, rating=rating))
            assert response.status_code == 422
            assert json.loads(response.data)['errors']['rating'] == 'Rating must be a whole number from 1 to 5'

    def test_numeric_string_rating(self, client, db):
        response = client.post('/api/feedback', json=dict(VALID_FEEDBACK, rating='4'))

        assert response.status_code == 201
        assert db.session.get(Feedback, json.loads(response.data)['data']['id']).rating == 4

    def test_non_object_body(self, client):
        response = client.post('/api/feedback', json=['Great service'])

        assert response.status_code == 422
        assert 'body' in json.loads(response.data)['errors']

    def test_required_fields(self, client):
        response = client.post('/api/feedback', json={})

        assert response.status_code == 422
        assert set(json.loads(response.data)['errors']) == {'name', 'email', 'subject', 'message', 'rating'}

    def test_list_admin_only(self, client, auth_headers, admin_headers):
        client.post('/api/feedback', json=VALID_FEEDBACK)

        assert client.get('/api/feedback', headers=auth_headers).status_code == 403

        response = client.get('/api/feedback', headers=admin_headers)
        assert response.status_code == 200
        data = json.loads(response.data)['data']
        assert len(data['feedback']) == 1
        assert data['pagination']['total'] == 1


class TestCliCommands:

    def test_create_admin(self, runner):
        result = runner.invoke(args=[
            'db-manage', 'create-admin',
            '--email', 'Root@Example.com', '--name', 'Root', '--password', 'RootPass123'
        ])

        assert result.exit_code == 0
        user = User.query.filter_by(email='root@example.com').first()
        assert user.role == UserRole.ADMIN
        assert user.check_password('RootPass123')

    def test_create_admin_promotes_existing_user(self, runner, sample_user):
        result = runner.invoke(args=[
            'db-manage', 'create-admin', '--email', 'test@example.com', '--password', 'Ignored123'
        ])

        assert result.exit_code == 0
        assert 'Promoted' in result.output
        assert User.query.filter_by(email='test@example.com').first().role == UserRole.ADMIN

    def test_seed_content(self, runner, admin_user):
        result = runner.invoke(args=['db-manage', 'seed-content'])

        assert result.exit_code == 0
        assert Content.query.count() == 5
        assert Content.query.filter_by(status=ContentStatus.PUBLISHED).count() == 5

        # existing slugs are skipped
        runner.invoke(args=['db-manage', 'seed-content'])
        assert Content.query.count() == 5

    def test_seed_content_needs_admin(self, runner):
        result = runner.invoke(args=['db-manage', 'seed-content'])

        assert result.exit_code != 0
        assert Content.query.count() == 0
