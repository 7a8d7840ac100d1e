from healthsync.models.model_base import Base
from healthsync.models.model_user import User
from healthsync.models.model_doctor_patient_link import DoctorPatientLink
from healthsync.models.model_health_log import HealthLog
from healthsync.models.model_message import Message
from healthsync.models.model_checkup import Checkup
