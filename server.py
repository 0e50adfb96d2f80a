from flask import Flask, request, jsonify

from api import enqueue_extraction
from config import ExtractionConfig
from lib.errors import MalformedPayload, PublishFailed
from lib.redis import RedisQueue, create_redis
from services import start_extraction_workers


def create_app(config: ExtractionConfig, queue: RedisQueue) -> Flask:
    app = Flask(__name__)

    # --------------------------------------------------------
    # ENDPOINTS
    # --------------------------------------------------------
    @app.route("/healthcheck", methods=["GET"])
    def healthcheck_endpoint():
        return jsonify(), 200

    @app.route("/extract", methods=["POST"])
    def extract_endpoint():
        """
        Enqueues a document extraction task.

        This endpoint receives a JSON payload describing one task: task and
        user IDs, the input and output S3 locations, an optional batch size
        and the layout model. The payload is validated and put on the
        extraction queue for the workers.

        Returns
        -------
        flask.Response
            A JSON response with status code 202 if the task is queued,
            400 if the payload is invalid, or 503 if the queue is unavailable.
        """

        data = request.get_json(silent=True)

        if not isinstance(data, dict):
            return jsonify({"error": "Request body must be a JSON object"}), 400

        try:
            queued = enqueue_extraction(queue, config, data)
        except MalformedPayload as e:
            return jsonify({"error": str(e)}), 400
        except PublishFailed as e:
            return jsonify({"error": str(e)}), 503

        return jsonify({"message": "Extraction queued", "item_id": queued.item_id}), 202

    return app


if __name__ == "__main__":
    config = ExtractionConfig.from_env()
    queue = RedisQueue(create_redis(config.redis_host, config.redis_port), config.max_attempts)

    print(f"Starting {config.workers} extraction workers...")
    start_extraction_workers(config, config.workers)

    print("Starting server...")
    app = create_app(config, queue)
    app.run(host="0.0.0.0", port=8000, threaded=True, use_reloader=False)
