"""Static landing page served at ``/``."""

from __future__ import annotations

INDEX_HTML = """<!DOCTYPE html>
<html>
  <head>
    <title>GCS Bucket Lister</title>
    <style>
      body { font-family: system-ui, -apple-system, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px; line-height: 1.6; }
      h1 { color: #1a73e8; }
      .button { display: inline-block; background: #1a73e8; color: white; padding: 10px 20px; text-decoration: none; border-radius: 4px; }
      .info { background: #e8f0fe; padding: 15px; border-radius: 4px; margin: 20px 0; }
      code { background: #f1f3f4; padding: 2px 5px; border-radius: 3px; font-family: monospace; }
    </style>
  </head>
  <body>
    <h1>GCS Bucket Lister</h1>
    <p>Lists the Google Cloud Storage buckets of the authenticated GCP project.</p>

    <div class="info">
      <h3>Authentication</h3>
      <p>Credentials are taken from the first of these that is available:</p>
      <ol>
        <li><code>GCP_SERVICE_ACCOUNT_JSON</code> holding a service-account key (raw or base64 JSON)</li>
        <li><code>GOOGLE_APPLICATION_CREDENTIALS</code> pointing at a service-account key file</li>
        <li><code>CLOUD_ACCESS_TOKEN</code> holding a ready-to-use access token</li>
        <li>a <code>service-account.json</code> key file in the working directory</li>
        <li>the <a href="https://cloud.google.com/sdk/docs/install" target="_blank">Google Cloud SDK</a>
          after <code>gcloud auth application-default login</code></li>
      </ol>
      <p>Set the project with <code>GCP_PROJECT_ID</code> or
        <code>gcloud config set project YOUR_PROJECT_ID</code>.</p>
    </div>

    <p>
      <a href="/api/buckets" class="button">View GCS Buckets</a>
    </p>
  </body>
</html>
"""

__all__ = ["INDEX_HTML"]
