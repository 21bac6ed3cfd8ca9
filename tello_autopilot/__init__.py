"""
Tello Autopilot Package
Web-controlled Tello with patrol and face tracking

Package structure:
- config.py: Configuration settings and config.ini loading
- shared_state.py: Session state shared by all workers
- initialization.py: Logging, directories and drone startup
- flight.py: Flight driver on top of djitellopy
- video.py: Raw frame sources
- detection.py: Face detection
- patrol.py: Autonomous patrol worker
- autopilot.py: Face tracking control loop
- snapshot.py: Snapshot request/consume handshake
- streaming.py: MJPEG stream publisher
- controller.py: DroneManager, the public command API
- webserver.py: Flask command surface
"""

__version__ = "1.0.0"
__description__ = "Tello patrol and face tracking autopilot with a web controller"
