# Auto Task MCP Configuration

import os

# サーバー設定
SERVER_CONFIG = {
    "name": "auto-task-mcp",
    "title": "Auto Task MCP Server",
    "version": "1.0.0",
    "protocol_version": "2025-11-05",
    "host": os.getenv("HOST", "0.0.0.0"),
    "port": int(os.getenv("PORT", "3002")),
    # リクエストボディ上限（10MB）
    "max_body_bytes": int(os.getenv("MAX_BODY_BYTES", str(10 * 1024 * 1024)))
}

# サーバー機能（起動後は変更しない）
CAPABILITIES = {
    "tools": {"listChanged": True},
    "resources": {},
    "prompts": {},
    "logging": {}
}

# CORS設定
CORS_CONFIG = {
    "allow_origins": ["*"],
    "allow_methods": ["GET", "POST", "OPTIONS"],
    "allow_headers": ["Content-Type", "Accept", "Authorization"],
    "allow_credentials": True
}

# ログ設定
LOG_CONFIG = {
    "level": os.getenv("LOG_LEVEL", "INFO").upper(),
    "format": "%(asctime)s %(levelname)s %(name)s - %(message)s"
}
