from models.weekday import Weekday
from models.room import AdminStatus, Room
from models.reservation import Reservation
from models.status import RoomStatus, RoomView, StatusInfo
from models.intent import BookingIntent, MaintenanceAnalysis, SearchIntent
from models.campus_data import CampusData

__all__ = [
    "Weekday",
    "AdminStatus",
    "Room",
    "Reservation",
    "RoomStatus",
    "RoomView",
    "StatusInfo",
    "SearchIntent",
    "BookingIntent",
    "MaintenanceAnalysis",
    "CampusData",
]
