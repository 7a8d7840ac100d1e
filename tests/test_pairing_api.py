from uuid import UUID

import pytest

from healthsync.core.policy import Principal
from healthsync.helpers.enums import UserRole
from healthsync.helpers.exception_handler import ValidateException
from healthsync.models import User
from healthsync.repository.repo_pairing import PairingRepository


def test_link_is_idempotent(make_user, link, db_session):
    doctor = make_user('doctor')
    patient = make_user('patient')

    first = link(doctor, patient)
    second = link(doctor, patient)
    assert first.id == second.id
    principal = Principal(id=UUID(doctor.id), role=UserRole.DOCTOR)
    assert len(PairingRepository(db_session).get_visible_links(principal)) == 1


def test_link_validates_roles(make_user, link):
    doctor = make_user('doctor')
    patient = make_user('patient')
    with pytest.raises(ValidateException, match='Doctor not found'):
        link(patient, patient)
    with pytest.raises(ValidateException, match='Patient not found'):
        link(doctor, doctor)


def test_patients_of_and_doctor_of(client, make_user, link):
    doctor = make_user('doctor', 'Dr. Sarah Johnson')
    zoe = make_user('patient', 'Zoe Adams')
    john = make_user('patient', 'John Smith')
    loner = make_user('patient', 'Nobody Linked')
    link(doctor, zoe)
    link(doctor, john)

    response = client.get('/api/pairings/patients', headers=doctor.headers)
    assert response.status_code == 200
    assert [p['full_name'] for p in response.json()['data']] == ['John Smith', 'Zoe Adams']

    response = client.get('/api/pairings/doctor', headers=john.headers)
    assert response.json()['data']['id'] == doctor.id

    response = client.get('/api/pairings/doctor', headers=loner.headers)
    assert response.status_code == 200
    assert response.json()['data'] is None


def test_pairing_views_are_role_scoped(client, make_user):
    doctor = make_user('doctor')
    patient = make_user('patient')
    assert client.get('/api/pairings/patients', headers=patient.headers).status_code == 403
    assert client.get('/api/pairings/doctor', headers=doctor.headers).status_code == 403


def test_links_visible_to_both_ends_only(client, make_user, link):
    doctor = make_user('doctor')
    patient = make_user('patient')
    outsider = make_user('patient')
    created = link(doctor, patient)

    for viewer in (doctor, patient):
        links = client.get('/api/pairings', headers=viewer.headers).json()['data']
        assert [item['id'] for item in links] == [str(created.id)]
    assert client.get('/api/pairings', headers=outsider.headers).json()['data'] == []


def test_deleting_a_user_removes_their_links(client, make_user, link, db_session):
    doctor = make_user('doctor')
    patient = make_user('patient')
    link(doctor, patient)

    db_session.delete(db_session.get(User, UUID(patient.id)))
    db_session.commit()

    assert not PairingRepository(db_session).is_linked(UUID(doctor.id), UUID(patient.id))
    assert client.get('/api/pairings/patients', headers=doctor.headers).json()['data'] == []
