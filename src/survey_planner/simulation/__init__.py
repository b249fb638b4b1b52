from .mission_simulator import MissionSimulator
