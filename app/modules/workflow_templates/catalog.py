"""
Built-in workflow templates.

Each builder returns a fresh WorkflowTemplate; registry.py calls them once at
import time. Workflow definitions are n8n-style node graphs whose
expressions ({{ ... }}) are resolved by the automation engine, not here.
"""

from app.modules.workflow_templates.schemas import (
    TemplateRequirements, TemplateVariable, VariableValidation, WorkflowTemplate
)

EMAIL_PROVIDERS = ("mailchimp", "sendgrid", "convertkit")
LEAD_MAGNET_TYPES = ("pdf", "video", "course", "template")


def _lead_magnet_variables():
    return (
        TemplateVariable(
            key="emailProvider", label="Email Provider", type="string", required=True,
            default_value="mailchimp", description="Choose your email service provider",
            validation=VariableValidation(options=EMAIL_PROVIDERS),
        ),
        TemplateVariable(
            key="listId", label="Email List ID", type="string", required=True,
            description="The ID of your email list",
        ),
        TemplateVariable(
            key="apiKey", label="Email Service API Key", type="string", required=True,
            description="API key for your email service",
        ),
        TemplateVariable(
            key="fromEmail", label="From Email", type="string", required=True,
            description="Email address to send from",
            validation=VariableValidation(pattern=r"^[^@]+@[^@]+\.[^@]+$"),
        ),
        TemplateVariable(
            key="fromName", label="From Name", type="string", required=True,
            default_value="Your Company", description="Name to display in from field",
        ),
        TemplateVariable(
            key="leadMagnetType", label="Lead Magnet Type", type="string", required=True,
            default_value="pdf", validation=VariableValidation(options=LEAD_MAGNET_TYPES),
        ),
        TemplateVariable(
            key="leadMagnetUrl", label="Lead Magnet URL", type="string", required=True,
            description="URL to the lead magnet file",
        ),
        TemplateVariable(
            key="leadMagnetName", label="Lead Magnet Name", type="string", required=True,
            default_value="Free Guide", description="Name of the lead magnet",
        ),
        TemplateVariable(
            key="welcomeEmailSubject", label="Welcome Email Subject", type="string", required=True,
            default_value="Your Free Guide is Ready!", description="Subject line for the welcome email",
        ),
        TemplateVariable(
            key="welcomeEmailContent", label="Welcome Email Content", type="string", required=True,
            default_value="Here is your free guide. Enjoy!", description="Content for the welcome email",
        ),
        TemplateVariable(
            key="defaultTags", label="Default Tags", type="array", required=False,
            default_value=["lead-magnet", "new-subscriber"],
            description="Tags to apply to new subscribers",
        ),
    )


def _send_email_node(node_id, name, position, subject, body):
    return {
        "id": node_id,
        "name": name,
        "type": "n8n-nodes-base.sendGrid",
        "typeVersion": 2,
        "position": position,
        "parameters": {
            "operation": "send",
            "fromEmail": "={{ $credentials.emailService.fromEmail }}",
            "fromName": "={{ $credentials.emailService.fromName }}",
            "toEmail": "={{ $json.email }}",
            "subject": subject,
            "text": body,
            "html": body,
            "options": {},
        },
    }


def _main(*targets):
    """Connection entry: one output branch per target node name."""
    return {"main": [[{"node": target, "type": "main", "index": 0}] for target in targets]}


def _lead_magnet_definition():
    nodes = [
        {
            "id": "webhook-trigger",
            "name": "Form Submission Webhook",
            "type": "n8n-nodes-base.webhook",
            "typeVersion": 2,
            "position": [240, 300],
            "parameters": {
                "httpMethod": "POST",
                "path": "lead-magnet",
                "responseMode": "onReceived",
                "options": {"rawBody": True},
            },
        },
        {
            "id": "validate-input",
            "name": "Validate Form Data",
            "type": "n8n-nodes-base.set",
            "typeVersion": 3.3,
            "position": [460, 300],
            "parameters": {
                "values": [
                    {"name": "email", "value": "={{ $json.body.email }}"},
                    {"name": "firstName", "value": '={{ $json.body.firstName || "" }}'},
                    {"name": "lastName", "value": '={{ $json.body.lastName || "" }}'},
                    {"name": "phone", "value": '={{ $json.body.phone || "" }}'},
                    {"name": "formId", "value": "={{ $json.body.formId }}"},
                    {"name": "leadMagnetType", "value": '={{ $json.body.leadMagnetType || "pdf" }}'},
                    {"name": "timestamp", "value": "={{ $now }}"},
                ],
                "options": {},
            },
        },
        {
            "id": "validate-email",
            "name": "Validate Email",
            "type": "n8n-nodes-base.switch",
            "typeVersion": 2,
            "position": [680, 300],
            "parameters": {
                "dataType": "string",
                "value1": "={{ $json.email }}",
                "rules": {"rules": [{"value2": "", "operation": "regexMatch", "output": 0}]},
            },
        },
        {
            "id": "add-to-email-list",
            "name": "Add to Email List",
            "type": "n8n-nodes-base.mailchimp",
            "typeVersion": 2,
            "position": [900, 200],
            "parameters": {
                "operation": "addOrUpdate",
                "listId": "={{ $credentials.mailchimpApi.listId }}",
                "email": "={{ $json.email }}",
                "mergeFields": {
                    "FNAME": "={{ $json.firstName }}",
                    "LNAME": "={{ $json.lastName }}",
                    "PHONE": "={{ $json.phone }}",
                },
                "tags": "={{ $credentials.defaultTags }}",
                "options": {"doubleOptin": False, "updateExisting": True},
            },
        },
        _send_email_node(
            "send-welcome-email", "Send Welcome Email", [1120, 200],
            "={{ $credentials.emailService.welcomeEmailSubject }}",
            "={{ $credentials.emailService.welcomeEmailContent }}",
        ),
        {
            "id": "schedule-followup",
            "name": "Schedule Follow-up",
            "type": "n8n-nodes-base.wait",
            "typeVersion": 1.1,
            "position": [1340, 200],
            "parameters": {"amount": 1, "unit": "days"},
        },
        _send_email_node(
            "send-followup-1", "Send Follow-up 1", [1560, 200],
            "={{ $credentials.emailService.followUpSubjects[0] }}",
            "={{ $credentials.emailService.followUpContent[0] }}",
        ),
        {
            "id": "deliver-lead-magnet",
            "name": "Deliver Lead Magnet",
            "type": "n8n-nodes-base.httpRequest",
            "typeVersion": 4.1,
            "position": [900, 400],
            "parameters": {
                "url": "={{ $credentials.leadMagnet.deliveryUrl }}",
                "method": "POST",
                "headers": {"Content-Type": "application/json"},
                "body": {
                    "email": "={{ $json.email }}",
                    "leadMagnetType": "={{ $json.leadMagnetType }}",
                    "firstName": "={{ $json.firstName }}",
                    "timestamp": "={{ $json.timestamp }}",
                },
                "options": {},
            },
        },
        {
            "id": "handle-error",
            "name": "Handle Error",
            "type": "n8n-nodes-base.set",
            "typeVersion": 3.3,
            "position": [680, 500],
            "parameters": {
                "values": [
                    {"name": "error", "value": '={{ $json.error || "Unknown error" }}'},
                    {"name": "timestamp", "value": "={{ $now }}"},
                    {"name": "requestId", "value": "={{ $runIndex }}"},
                ],
                "options": {},
            },
        },
        {
            "id": "log-error",
            "name": "Log Error",
            "type": "n8n-nodes-base.httpRequest",
            "typeVersion": 4.1,
            "position": [900, 500],
            "parameters": {
                "url": "={{ $credentials.logging.errorWebhook }}",
                "method": "POST",
                "headers": {"Content-Type": "application/json"},
                "body": {
                    "error": "={{ $json.error }}",
                    "timestamp": "={{ $json.timestamp }}",
                    "requestId": "={{ $json.requestId }}",
                    "workflow": "lead-magnet-workflow",
                },
                "options": {},
            },
        },
    ]
    connections = {
        "Form Submission Webhook": _main("Validate Form Data"),
        "Validate Form Data": _main("Validate Email"),
        # Output 0: valid email, output 1: invalid
        "Validate Email": _main("Add to Email List", "Handle Error"),
        "Add to Email List": _main("Send Welcome Email"),
        "Send Welcome Email": _main("Deliver Lead Magnet"),
        "Schedule Follow-up": _main("Send Follow-up 1"),
        "Handle Error": _main("Log Error"),
    }
    return {
        "nodes": nodes,
        "connections": connections,
        "active": False,
        "settings": {
            "executionOrder": "v1",
            "saveManualExecutions": True,
            "callerPolicyDefaultOption": "workflowsFromSameOwner",
        },
        "staticData": {},
        "pinData": {},
    }


def lead_magnet_template() -> WorkflowTemplate:
    return WorkflowTemplate(
        id="lead-magnet-workflow",
        name="Lead Magnet Funnel Workflow",
        description=(
            "Complete lead magnet automation with email collection, validation, "
            "welcome sequence, and lead delivery"
        ),
        category="lead-magnet",
        version="1.0.0",
        author="Funnel Builder",
        tags=("lead-magnet", "email-marketing", "automation"),
        variables=_lead_magnet_variables(),
        requirements=TemplateRequirements(
            nodes=(
                "n8n-nodes-base.webhook",
                "n8n-nodes-base.mailchimp",
                "n8n-nodes-base.sendGrid",
                "n8n-nodes-base.httpRequest",
            ),
            credentials=("mailchimpApi", "sendGridApi"),
            environment=("N8N_WEBHOOK_URL",),
        ),
        workflow_definition=_lead_magnet_definition(),
    )


BUILT_IN_TEMPLATES = (
    lead_magnet_template,
)
