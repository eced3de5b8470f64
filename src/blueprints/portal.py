"""
Captive portal probe endpoints.

Operating systems probe these URLs to detect a captive portal; the
controller's guest portal paths land here too. Everything is sent to
the portal landing page.
"""
from flask import Blueprint, redirect

portal_bp = Blueprint('portal', __name__)

PORTAL_LANDING = '/'


@portal_bp.route('/generate_204', methods=['GET'])
@portal_bp.route('/hotspot-detect.html', methods=['GET'])
@portal_bp.route('/connecttest.txt', methods=['GET'])
@portal_bp.route('/ncsi.txt', methods=['GET'])
def connectivity_probe():
    """Android, Apple and Windows connectivity checks."""
    return redirect(PORTAL_LANDING, code=302)


@portal_bp.route('/guest/s/default/', methods=['GET'])
def controller_guest_portal():
    """Controller's external portal entry point."""
    return redirect(PORTAL_LANDING, code=302)


@portal_bp.route('/guest/s/default/login', methods=['POST'])
def controller_guest_login():
    return redirect(PORTAL_LANDING, code=302)
