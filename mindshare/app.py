"""HTTP エンドポイント（Flask）."""

import logging

from flask import Flask, jsonify, request

from mindshare.checker import check_user, normalize_query_username

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.json.sort_keys = False  # 期間の並びを保つ


@app.route("/api/check")
def check():
    try:
        username = normalize_query_username(request.args.get("username"))
        if username is None:
            return jsonify({"error": "missing username"}), 400
        return jsonify(check_user(username))
    except Exception as e:
        logger.exception("チェック処理に失敗しました")
        return jsonify({"error": str(e)}), 500


@app.route("/")
def ok():
    return "OK"
