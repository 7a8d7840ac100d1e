from datetime import date, timedelta

import pytest


def append(client, patient, **metrics):
    payload = {'steps': 8000, 'water_ml': 2000, 'heart_rate': 70, 'sleep_hours': 7.5}
    payload.update(metrics)
    response = client.post('/api/health-logs', headers=patient.headers, json=payload)
    assert response.status_code == 200, response.text
    return response.json()['data']


@pytest.fixture
def paired(make_user, link):
    doctor = make_user('doctor')
    patient = make_user('patient')
    link(doctor, patient)
    return doctor, patient


def test_paired_doctor_reads_patient_history(client, paired):
    doctor, patient = paired
    created = append(client, patient, steps=8000, water_ml=2000, heart_rate=72, sleep_hours=7.5)
    assert created['user_id'] == patient.id
    assert created['date'] == date.today().isoformat()

    response = client.get(f'/api/health-logs/patients/{patient.id}', headers=doctor.headers)
    assert response.status_code == 200
    logs = response.json()['data']
    assert [log['id'] for log in logs] == [created['id']]
    assert logs[0]['steps'] == 8000
    assert logs[0]['sleep_hours'] == 7.5


def test_unpaired_doctor_gets_empty_history(client, paired, make_user):
    _, patient = paired
    append(client, patient)
    stranger = make_user('doctor')

    response = client.get(f'/api/health-logs/patients/{patient.id}', headers=stranger.headers)
    assert response.status_code == 200
    assert response.json()['data'] == []


def test_patient_cannot_read_other_patient(client, paired, make_user):
    _, patient = paired
    append(client, patient)
    other = make_user('patient')
    response = client.get(f'/api/health-logs/patients/{patient.id}', headers=other.headers)
    assert response.json()['data'] == []


def test_unknown_patient_is_empty_not_an_error(client, paired):
    doctor, _ = paired
    response = client.get('/api/health-logs/patients/00000000-0000-0000-0000-000000000000',
                          headers=doctor.headers)
    assert response.status_code == 200
    assert response.json()['data'] == []


def test_doctor_cannot_append(client, paired):
    doctor, _ = paired
    response = client.post('/api/health-logs', headers=doctor.headers,
                           json={'steps': 1, 'water_ml': 1, 'heart_rate': 1, 'sleep_hours': 1})
    assert response.status_code == 403


def test_negative_metrics_are_rejected(client, paired):
    _, patient = paired
    response = client.post('/api/health-logs', headers=patient.headers,
                           json={'steps': -5, 'water_ml': 1, 'heart_rate': 1, 'sleep_hours': 1})
    assert response.status_code == 422


def test_history_newest_first_and_limited(client, paired):
    doctor, patient = paired
    today = date.today()
    for days_ago in (3, 1, 2):
        append(client, patient, date=(today - timedelta(days=days_ago)).isoformat())
    # a second entry for the same day is kept
    append(client, patient, date=(today - timedelta(days=1)).isoformat(), steps=100)

    response = client.get(f'/api/health-logs/patients/{patient.id}', headers=doctor.headers)
    dates = [log['date'] for log in response.json()['data']]
    assert len(dates) == 4
    assert dates == sorted(dates, reverse=True)

    response = client.get(f'/api/health-logs/patients/{patient.id}', headers=doctor.headers,
                          params={'limit': 2})
    logs = response.json()['data']
    assert len(logs) == 2
    assert logs[0]['steps'] == 100


def test_history_date_range_and_search(client, paired):
    _, patient = paired
    today = date.today()
    append(client, patient, date=(today - timedelta(days=10)).isoformat(), sleep_hours=5.0)
    append(client, patient, date=(today - timedelta(days=2)).isoformat(), sleep_hours=8.0,
           notes='Slept well after yoga')

    response = client.get('/api/health-logs/me', headers=patient.headers,
                          params={'start_date': (today - timedelta(days=5)).isoformat()})
    assert len(response.json()['data']) == 1

    response = client.get('/api/health-logs/me', headers=patient.headers, params={'q': 'low sleep'})
    assert [log['sleep_hours'] for log in response.json()['data']] == [5.0]

    response = client.get('/api/health-logs/me', headers=patient.headers, params={'q': 'yoga'})
    assert [log['notes'] for log in response.json()['data']] == ['Slept well after yoga']


def test_summary_has_alerts_for_latest_entry(client, paired):
    doctor, patient = paired
    today = date.today()
    append(client, patient, date=(today - timedelta(days=1)).isoformat())
    append(client, patient, date=today.isoformat(), heart_rate=110, sleep_hours=5.0, steps=3000, water_ml=1000)

    response = client.get(f'/api/health-logs/patients/{patient.id}/summary', headers=doctor.headers)
    assert response.status_code == 200
    summary = response.json()['data']
    assert summary['entries'] == 2
    assert summary['latest']['heart_rate'] == 110
    assert summary['averages']['heart_rate'] == 90
    assert {alert['message'] for alert in summary['alerts']} == {
        'High heart rate detected', 'Insufficient sleep', 'Low water intake', 'Low activity level',
    }


def test_summary_for_unpaired_doctor_is_empty(client, paired, make_user):
    _, patient = paired
    append(client, patient)
    stranger = make_user('doctor')
    summary = client.get(f'/api/health-logs/patients/{patient.id}/summary',
                         headers=stranger.headers).json()['data']
    assert summary['entries'] == 0
    assert summary['latest'] is None
    assert summary['alerts'] == []


def test_stats_for_metric(client, paired):
    doctor, patient = paired
    today = date.today()
    for days_ago, heart_rate in ((3, 60), (2, 64), (1, 80), (0, 84)):
        append(client, patient, date=(today - timedelta(days=days_ago)).isoformat(), heart_rate=heart_rate)

    response = client.get(f'/api/health-logs/patients/{patient.id}/stats', headers=doctor.headers,
                          params={'metric': 'heart_rate'})
    stats = response.json()['data']
    assert stats['metric'] == 'heart_rate'
    assert stats['count'] == 4
    assert stats['average'] == 72.0
    assert stats['minimum'] == 60
    assert stats['maximum'] == 84
    assert stats['trend'] == 'up'


def test_sleep_hours_bound_applies_after_rounding(client, paired):
    _, patient = paired
    response = client.post('/api/health-logs', headers=patient.headers,
                           json={'steps': 1, 'water_ml': 1, 'heart_rate': 1, 'sleep_hours': 99.96})
    assert response.status_code == 422

    assert append(client, patient, sleep_hours=99.94)['sleep_hours'] == 99.9
