"""HTTP API serving donations, campaigns and impact data to the frontend."""

import logging
import math
from datetime import date
from typing import Optional

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from . import mock_data
from .config import Settings
from .repository import DuplicateDonorError, Repositories, record_region

logger = logging.getLogger(__name__)

# Character limits applied to user-supplied donation fields
DONATION_FIELD_LIMITS = {
    "donorId": 100,
    "donorName": 200,
    "campaign": 200,
    "region": 100,
}


def sanitize(value, limit: int) -> str:
    """Strip angle brackets and surrounding whitespace, then truncate."""
    return str(value).replace("<", "").replace(">", "").strip()[:limit]


def is_positive_amount(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def summarize_impact(repos: Repositories) -> dict:
    """Totals, impact by type and per-region breakdown from transformed data."""
    donations = repos.donations.all()
    campaigns = repos.campaigns.all()

    breakdown: dict[str, dict] = {}
    for campaign in campaigns:
        region = record_region(campaign) or "Unknown"
        entry = breakdown.setdefault(region, {"donations": 0, "amount": 0, "beneficiaries": 0})
        entry["beneficiaries"] += campaign.get("beneficiaries", 0)
    for donation in donations:
        region = record_region(donation) or "Unknown"
        entry = breakdown.setdefault(region, {"donations": 0, "amount": 0, "beneficiaries": 0})
        entry["donations"] += 1
        entry["amount"] += donation.get("amount", 0)

    def metric_total(key: str) -> int:
        return sum(c.get("impactMetrics", {}).get(key, 0) for c in campaigns)

    return {
        "totalDonations": len(donations),
        "totalAmount": sum(d.get("amount", 0) for d in donations),
        "totalBeneficiaries": sum(c.get("beneficiaries", 0) for c in campaigns),
        "impactsByType": {
            "people_helped": {"total": metric_total("peopleHelped"),
                              "description": "People helped by funded programs"},
            "projects_completed": {"total": metric_total("projectsCompleted"),
                                   "description": "Projects and programs completed"},
            "resources_distributed": {"total": metric_total("resourcesDistributed"),
                                      "description": "Resources and supplies distributed"},
        },
        "regionBreakdown": breakdown,
    }


def _json_body() -> Optional[dict]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else None


def _repos() -> Repositories:
    return current_app.extensions["donation_tracker"]


def create_app(settings: Optional[Settings] = None,
               repositories: Optional[Repositories] = None) -> Flask:
    """Build the Flask app.

    Args:
        settings: Where to look for transformed data. Defaults to Settings().
        repositories: Pre-built stores, mainly for tests. Loaded from
            settings.output_dir when omitted.

    Returns:
        Configured Flask application
    """
    settings = settings or Settings()
    app = Flask(__name__)
    CORS(app, origins="*", send_wildcard=True,
         methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
         allow_headers=["Content-Type", "Authorization"])

    if repositories is None:
        repositories = Repositories.load(settings.output_dir, use_mock=settings.use_mock_data)
    app.extensions["donation_tracker"] = repositories

    register_error_handlers(app)
    register_routes(app)
    return app


def register_error_handlers(app: Flask):
    @app.errorhandler(404)
    def not_found(e):
        return jsonify(error="Not found"), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify(error="Method not allowed"), 405

    @app.errorhandler(Exception)
    def internal_error(e):
        if isinstance(e, HTTPException):
            return jsonify(error=e.description), e.code
        logger.exception(f"Error handling {request.method} {request.path}")
        return jsonify(error="Internal server error"), 500


def register_routes(app: Flask):
    # --- DONATIONS ---

    @app.route("/api/donations", methods=["GET"])
    def get_donations():
        args = request.args
        try:
            donations = _repos().donations.filter(
                donor=args.get("donor"),
                campaign=args.get("campaign"),
                region=args.get("region"),
                start_date=args.get("startDate"),
                end_date=args.get("endDate"),
            )
        except ValueError:
            return jsonify(error="Invalid date: use YYYY-MM-DD"), 400
        return jsonify(donations), 200

    @app.route("/api/donations", methods=["POST"])
    def create_donation():
        body = _json_body()
        if body is None:
            return jsonify(error="Request body must be a JSON object"), 400

        if not body.get("donorId") or not body.get("amount") or not body.get("campaign"):
            return jsonify(error="Missing required fields: donorId, amount, and campaign are required"), 400

        if not is_positive_amount(body["amount"]):
            return jsonify(error="Invalid amount: must be a positive number"), 400

        donation = dict(body)
        for key, limit in DONATION_FIELD_LIMITS.items():
            donation[key] = sanitize(body.get(key) or "", limit)
        if not donation.get("date"):
            donation["date"] = date.today().isoformat()

        created = _repos().donations.add(donation)
        logger.info(f"Recorded donation {created['id']} of {created['amount']}")
        return jsonify(created), 201

    # --- IMPACT ---

    @app.route("/api/impact-summary", methods=["GET"])
    def get_impact_summary():
        repos = _repos()
        summary = summarize_impact(repos) if repos.from_export else dict(mock_data.MOCK_IMPACT_SUMMARY)

        region = request.args.get("region")
        region_data = summary["regionBreakdown"].get(region) if region else None
        if region_data:
            summary = {
                **summary,
                "totalDonations": region_data["donations"],
                "totalAmount": region_data["amount"],
                "totalBeneficiaries": region_data["beneficiaries"],
            }
        return jsonify(summary), 200

    @app.route("/api/impact-locations", methods=["GET"])
    def get_impact_locations():
        return jsonify(_repos().locations.all()), 200

    # --- CAMPAIGNS ---

    @app.route("/api/campaigns", methods=["GET"])
    def get_campaigns():
        args = request.args
        campaigns = _repos().campaigns.filter(
            category=args.get("category"),
            region=args.get("region"),
            status=args.get("status"),
        )
        return jsonify(campaigns), 200

    @app.route("/api/campaigns/<campaign_id>", methods=["GET"])
    def get_campaign(campaign_id):
        campaign = _repos().campaigns.get(campaign_id)
        if campaign is None:
            return jsonify(error="Campaign not found"), 404
        return jsonify(campaign), 200

    # --- DONOR PROFILES ---

    @app.route("/api/donor-profile", methods=["GET", "POST", "PUT", "DELETE"])
    @app.route("/api/donor-profile/<donor_id>", methods=["GET", "PUT", "DELETE"])
    def donor_profile(donor_id=None):
        donors = _repos().donors
        donor_id = donor_id or request.args.get("id")

        if request.method == "GET":
            if not donor_id:
                return jsonify(donors.all()), 200
            donor = donors.get(donor_id)
            if donor is None:
                return jsonify(error="Donor not found"), 404
            return jsonify(donor), 200

        if request.method == "POST":
            body = _json_body() or {}
            if not body.get("name") or not body.get("email"):
                return jsonify(error="Missing required fields: name and email are required"), 400
            preferred = body.get("preferredCampaigns")
            if preferred is not None and not isinstance(preferred, list):
                return jsonify(error="preferredCampaigns must be a list"), 400
            try:
                donor = donors.create(body["name"], body["email"], preferred)
            except DuplicateDonorError:
                return jsonify(error="A donor with this email already exists"), 409
            return jsonify(donor), 201

        if not donor_id:
            return jsonify(error="Donor ID is required"), 400

        if request.method == "PUT":
            body = _json_body()
            if body is None:
                return jsonify(error="Request body must be a JSON object"), 400
            updated = donors.update(donor_id, body)
            if updated is None:
                return jsonify(error="Donor not found"), 404
            return jsonify(updated), 200

        # DELETE
        if not donors.delete(donor_id):
            return jsonify(error="Donor not found"), 404
        return "", 204

    # --- FEEDBACK ---

    @app.route("/api/feedback", methods=["GET"])
    def get_feedback():
        args = request.args
        feedback = _repos().feedback.filter(
            campaign=args.get("campaign"),
            region=args.get("region"),
            status=args.get("status"),
        )
        return jsonify(feedback), 200

    @app.route("/api/feedback", methods=["POST"])
    def submit_feedback():
        body = _json_body() or {}
        required = ("beneficiaryName", "campaign", "region", "message")
        if any(not body.get(key) for key in required):
            return jsonify(error="Missing required fields"), 400

        feedback = _repos().feedback.add(body)
        logger.info(f"New feedback submitted: {feedback['id']}")
        return jsonify(message="Feedback submitted successfully", feedback=feedback), 201

    # --- NOTIFICATIONS ---

    @app.route("/api/notifications", methods=["GET"])
    def get_notifications():
        args = request.args
        donor_id = args.get("donorId")
        if not donor_id:
            return jsonify(error="donorId is required"), 400
        notifications = _repos().notifications.for_donor(
            donor_id,
            unread_only=args.get("unread") == "true",
            notification_type=args.get("type"),
        )
        return jsonify(notifications), 200

    @app.route("/api/notifications/unread-count", methods=["GET"])
    def get_unread_count():
        donor_id = request.args.get("donorId")
        if not donor_id:
            return jsonify(error="donorId is required"), 400
        return jsonify(count=_repos().notifications.unread_count(donor_id)), 200

    @app.route("/api/notifications", methods=["POST"])
    def send_notification():
        body = _json_body() or {}
        required = ("donorId", "type", "title", "message")
        if any(not body.get(key) for key in required):
            return jsonify(error="Missing required fields"), 400

        notification = _repos().notifications.add(body)
        if body.get("sendEmail"):
            logger.info(f"Email delivery requested for donor {notification['donorId']}: {notification['title']}")
        return jsonify(notification), 201

    @app.route("/api/notifications/mark-read", methods=["PUT"])
    def mark_notification_read():
        notification_id = (_json_body() or {}).get("notificationId")
        if not notification_id:
            return jsonify(error="notificationId is required"), 400
        if not _repos().notifications.mark_read(notification_id):
            return jsonify(error="Notification not found"), 404
        return jsonify(success=True), 200

    @app.route("/api/notifications/mark-all-read", methods=["PUT"])
    def mark_all_notifications_read():
        donor_id = (_json_body() or {}).get("donorId")
        if not donor_id:
            return jsonify(error="donorId is required"), 400
        _repos().notifications.mark_all_read(donor_id)
        return jsonify(success=True), 200

    # --- TESTIMONIALS ---

    @app.route("/api/testimonials", methods=["GET"])
    def get_testimonials():
        args = request.args
        verified = args.get("verified")
        testimonials = _repos().testimonials.filter(
            campaign=args.get("campaign"),
            region=args.get("region"),
            verified=None if verified is None else verified == "true",
        )
        return jsonify(testimonials), 200
