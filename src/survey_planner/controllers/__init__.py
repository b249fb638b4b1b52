from .mission_controller import MissionController
