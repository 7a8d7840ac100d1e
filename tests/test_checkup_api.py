from datetime import datetime, timedelta, timezone

import pytest

from healthsync.core.config import settings


def schedule(client, doctor, patient, days_ahead=7, purpose='Follow-up', **extra):
    when = datetime.now(timezone.utc) + timedelta(days=days_ahead)
    return client.post('/api/checkups', headers=doctor.headers, json={
        'patient_id': patient.id, 'date': when.isoformat(), 'purpose': purpose, **extra,
    })


@pytest.fixture
def scheduled(client, make_user):
    doctor = make_user('doctor')
    patient = make_user('patient')
    response = schedule(client, doctor, patient, purpose='Regular Health Checkup')
    assert response.status_code == 200, response.text
    return doctor, patient, response.json()['data']


def test_checkup_visible_to_doctor_and_patient(client, scheduled):
    doctor, patient, checkup = scheduled
    assert checkup['status'] == 'upcoming'
    assert checkup['doctor_id'] == doctor.id
    assert checkup['patient']['id'] == patient.id

    for viewer in (doctor, patient):
        listed = client.get('/api/checkups', headers=viewer.headers).json()['data']
        assert [c['id'] for c in listed] == [checkup['id']]


def test_checkup_hidden_from_others(client, scheduled, make_user):
    other_doctor = make_user('doctor')
    other_patient = make_user('patient')
    assert client.get('/api/checkups', headers=other_doctor.headers).json()['data'] == []
    assert client.get('/api/checkups', headers=other_patient.headers).json()['data'] == []


def test_complete_then_cancel_is_rejected(client, scheduled):
    doctor, patient, checkup = scheduled
    url = f"/api/checkups/{checkup['id']}/status"

    response = client.put(url, headers=doctor.headers, json={'status': 'completed'})
    assert response.status_code == 200
    assert response.json()['data']['status'] == 'completed'

    response = client.put(url, headers=doctor.headers, json={'status': 'cancelled'})
    assert response.status_code == 409
    assert response.json()['message'] == 'Checkup is already completed'

    listed = client.get('/api/checkups', headers=patient.headers).json()['data']
    assert listed[0]['status'] == 'completed'


def test_terminal_transition_can_be_ignored(client, scheduled, monkeypatch):
    monkeypatch.setattr(settings, 'CHECKUP_TERMINAL_TRANSITION', 'ignore')
    doctor, _, checkup = scheduled
    url = f"/api/checkups/{checkup['id']}/status"

    assert client.put(url, headers=doctor.headers, json={'status': 'cancelled'}).status_code == 200
    response = client.put(url, headers=doctor.headers, json={'status': 'completed'})
    assert response.status_code == 200
    assert response.json()['data']['status'] == 'cancelled'


def test_upcoming_to_upcoming_is_invalid(client, scheduled):
    doctor, _, checkup = scheduled
    response = client.put(f"/api/checkups/{checkup['id']}/status", headers=doctor.headers,
                          json={'status': 'upcoming'})
    assert response.status_code == 400


def test_patient_cannot_change_status(client, scheduled):
    _, patient, checkup = scheduled
    response = client.put(f"/api/checkups/{checkup['id']}/status", headers=patient.headers,
                          json={'status': 'cancelled'})
    assert response.status_code == 403


def test_other_doctor_sees_not_found(client, scheduled, make_user):
    _, _, checkup = scheduled
    other_doctor = make_user('doctor')
    response = client.put(f"/api/checkups/{checkup['id']}/status", headers=other_doctor.headers,
                          json={'status': 'cancelled'})
    assert response.status_code == 404


def test_edit_checkup(client, scheduled):
    doctor, _, checkup = scheduled
    response = client.put(f"/api/checkups/{checkup['id']}", headers=doctor.headers,
                          json={'purpose': 'Blood test', 'notes': 'Fasting required'})
    assert response.status_code == 200
    data = response.json()['data']
    assert data['purpose'] == 'Blood test'
    assert data['notes'] == 'Fasting required'
    assert data['status'] == 'upcoming'

    response = client.put(f"/api/checkups/{checkup['id']}", headers=doctor.headers, json={'purpose': '  '})
    assert response.status_code == 400


def test_status_filter_and_date_order(client, make_user):
    doctor = make_user('doctor')
    patient = make_user('patient')
    later = schedule(client, doctor, patient, days_ahead=14, purpose='Later').json()['data']
    sooner = schedule(client, doctor, patient, days_ahead=2, purpose='Sooner').json()['data']
    client.put(f"/api/checkups/{later['id']}/status", headers=doctor.headers, json={'status': 'cancelled'})

    listed = client.get('/api/checkups', headers=patient.headers).json()['data']
    assert [c['purpose'] for c in listed] == ['Sooner', 'Later']

    upcoming = client.get('/api/checkups', headers=patient.headers, params={'status': 'upcoming'}).json()['data']
    assert [c['id'] for c in upcoming] == [sooner['id']]


def test_create_validation(client, make_user):
    doctor = make_user('doctor')
    patient = make_user('patient')
    other_doctor = make_user('doctor')

    response = schedule(client, doctor, patient, purpose='   ')
    assert response.status_code == 400
    assert response.json()['message'] == 'Purpose is required'

    response = schedule(client, doctor, other_doctor)
    assert response.status_code == 400
    assert response.json()['message'] == 'Patient not found'

    assert schedule(client, patient, patient).status_code == 403


def test_pairing_requirement_for_checkups(client, make_user, link, monkeypatch):
    monkeypatch.setattr(settings, 'REQUIRE_PAIRING_FOR_CHECKUPS', True)
    doctor = make_user('doctor')
    patient = make_user('patient')
    assert schedule(client, doctor, patient).status_code == 403

    link(doctor, patient)
    assert schedule(client, doctor, patient).status_code == 200
