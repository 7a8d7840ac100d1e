from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from healthsync.core.config import settings


def send(client, sender, receiver, text, **extra):
    return client.post('/api/messages', headers=sender.headers,
                       json={'receiver_id': receiver.id, 'message': text, **extra})


def test_thread_is_shared_and_ordered(client, make_user):
    doctor = make_user('doctor')
    patient = make_user('patient')

    response = send(client, patient, doctor, 'Hello doctor')
    assert response.status_code == 200
    first = response.json()['data']
    assert first['sender_id'] == patient.id
    assert first['receiver_id'] == doctor.id
    send(client, doctor, patient, 'Hello, how are you feeling?')
    send(client, patient, doctor, 'Much better today')

    for viewer, counterpart in ((doctor, patient), (patient, doctor)):
        response = client.get(f'/api/messages/thread/{counterpart.id}', headers=viewer.headers)
        assert response.status_code == 200
        assert [m['message'] for m in response.json()['data']] == [
            'Hello doctor', 'Hello, how are you feeling?', 'Much better today',
        ]


def test_outsider_gets_empty_thread(client, make_user):
    doctor = make_user('doctor')
    patient = make_user('patient')
    outsider = make_user('patient')
    send(client, patient, doctor, 'Private')

    response = client.get('/api/messages/thread', headers=outsider.headers,
                          params={'user_a': patient.id, 'user_b': doctor.id})
    assert response.status_code == 200
    assert response.json()['data'] == []


def test_sender_cannot_be_forged(client, make_user):
    doctor = make_user('doctor')
    patient = make_user('patient')
    other = make_user('patient')

    response = send(client, patient, doctor, 'I am someone else', sender_id=other.id)
    assert response.status_code == 403

    thread = client.get(f'/api/messages/thread/{doctor.id}', headers=other.headers).json()['data']
    assert thread == []


def test_explicit_sender_matching_caller_is_accepted(client, make_user):
    doctor = make_user('doctor')
    patient = make_user('patient')
    assert send(client, patient, doctor, 'Hi', sender_id=patient.id).status_code == 200


def test_empty_message_is_rejected(client, make_user):
    doctor = make_user('doctor')
    patient = make_user('patient')
    response = send(client, patient, doctor, '   ')
    assert response.status_code == 400
    assert response.json()['message'] == 'Message cannot be empty'


def test_unknown_receiver_is_rejected(client, make_user):
    patient = make_user('patient')
    response = client.post('/api/messages', headers=patient.headers, json={
        'receiver_id': '00000000-0000-0000-0000-000000000000', 'message': 'Anyone?',
    })
    assert response.status_code == 400
    assert response.json()['message'] == 'Receiver not found'


def test_pairing_not_required_by_default(client, make_user):
    patient = make_user('patient')
    other = make_user('patient')
    assert send(client, patient, other, 'Hi there').status_code == 200


def test_pairing_requirement_when_enabled(client, make_user, link, monkeypatch):
    monkeypatch.setattr(settings, 'REQUIRE_PAIRING_FOR_MESSAGES', True)
    doctor = make_user('doctor')
    patient = make_user('patient')
    stranger = make_user('doctor')
    link(doctor, patient)

    assert send(client, patient, doctor, 'Paired hello').status_code == 200
    assert send(client, doctor, patient, 'Paired reply').status_code == 200
    assert send(client, patient, stranger, 'Unpaired hello').status_code == 403


def test_storage_failure_is_opaque_and_rolled_back(client, make_user, monkeypatch):
    doctor = make_user('doctor')
    patient = make_user('patient')

    def failing_commit(self):
        raise OperationalError('INSERT INTO messages', {}, Exception('disk I/O error'))

    with monkeypatch.context() as patched:
        patched.setattr(Session, 'commit', failing_commit)
        response = send(client, patient, doctor, 'Will not be stored')

    assert response.status_code == 500
    assert response.json() == {'success': False, 'code': '500', 'message': 'Storage failure'}
    assert client.get(f'/api/messages/thread/{doctor.id}', headers=patient.headers).json()['data'] == []
