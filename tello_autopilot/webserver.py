"""
Web server for the drone controller
Flask pages, the command API and the MJPEG video stream
"""

import logging
import os

from flask import Flask, Response, jsonify, render_template, request
from flask_cors import CORS

from tello_autopilot.config import STATIC_DIR
from tello_autopilot.flight import FlipDirection
from tello_autopilot.streaming import MIMETYPE

logger = logging.getLogger(__name__)

# command name -> action on the DroneManager
COMMANDS = {
    "ceaseRotation": lambda drone, req: drone.cease_rotation(),
    "takeOff": lambda drone, req: drone.take_off(),
    "land": lambda drone, req: drone.land(),
    "hover": lambda drone, req: drone.hover(),
    "up": lambda drone, req: drone.up(),
    "clockwise": lambda drone, req: drone.clockwise(),
    "counterClockwise": lambda drone, req: drone.counter_clockwise(),
    "down": lambda drone, req: drone.down(),
    "forward": lambda drone, req: drone.forward(),
    "left": lambda drone, req: drone.left(),
    "right": lambda drone, req: drone.right(),
    "backward": lambda drone, req: drone.backward(),
    "speed": lambda drone, req: drone.set_speed(req.values.get("speed")),
    "frontFlip": lambda drone, req: drone.flip(FlipDirection.FRONT),
    "leftFlip": lambda drone, req: drone.flip(FlipDirection.LEFT),
    "rightFlip": lambda drone, req: drone.flip(FlipDirection.RIGHT),
    "backFlip": lambda drone, req: drone.flip(FlipDirection.BACK),
    "throwTakeOff": lambda drone, req: drone.throw_take_off(),
    "bounce": lambda drone, req: drone.bounce(),
    "patrol": lambda drone, req: drone.start_patrol(),
    "stopPatrol": lambda drone, req: drone.stop_patrol(),
    "stopFaceDetectTrack": lambda drone, req: drone.disable_tracking(),
    "faceDetectTrack": lambda drone, req: drone.enable_tracking(),
    "snapshot": lambda drone, req: drone.take_snapshot(),
}


def api_response(result, code):
    return jsonify({"result": result, "code": code}), code


def create_app(drone, static_dir=STATIC_DIR):
    app = Flask(__name__, static_folder=os.path.abspath(static_dir), static_url_path="/static")
    CORS(app)

    @app.route("/")
    def view_index():
        return render_template("index.html")

    @app.route("/controller/")
    def view_controller():
        return render_template("controller.html")

    @app.route("/api/command/", methods=["GET", "POST"])
    def api_command():
        command = request.values.get("command", "")
        logger.info("action=api_command command=%s", command)
        action = COMMANDS.get(command)
        if action is None:
            return api_response("Not found", 404)
        action(drone, request)
        return api_response("OK", 200)

    @app.route("/api/status")
    def api_status():
        return jsonify(drone.status())

    @app.route("/video/streaming")
    def video_streaming():
        return Response(drone.stream.frames(), mimetype=MIMETYPE)

    @app.errorhandler(404)
    def not_found(error):
        return api_response("Not found", 404)

    return app


def start_web_server(drone, address, port):
    app = create_app(drone)
    logger.info("🌐 Web server listening on %s:%d", address, port)
    app.run(host=address, port=port, threaded=True, use_reloader=False)
