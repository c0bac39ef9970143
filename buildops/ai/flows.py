"""
Prompt flows for the AI-assisted features.

Each flow formats domain data into a prompt, asks the model for a JSON object
and checks the shape of what comes back before handing it to a view.
"""
import logging

from buildops.core.exceptions import AIServiceError
from .client import get_client

logger = logging.getLogger(__name__)

RISK_SEVERITIES = ('Low', 'Medium', 'High')
NO_DAILY_LOGS_SUMMARY = 'No daily logs have been recorded for this project yet. Cannot generate a summary.'
NO_INTERACTIONS_SUMMARY = 'No interactions have been recorded for this client yet. Cannot generate a summary.'


def _require_text(data, key):
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise AIServiceError(f"AI response is missing '{key}'.")
    return value.strip()


def _require_list(data, key):
    value = data.get(key)
    if not isinstance(value, list):
        raise AIServiceError(f"AI response is missing '{key}'.")
    return value


def analyze_project_risks(name, description, budget, location, client=None):
    """Return ``{'risks': [{'risk', 'severity', 'mitigation'}, ...]}``"""
    prompt = (
        "You are an expert risk management consultant specializing in large-scale construction projects.\n"
        "Based on the following project details, identify a list of potential risks. For each risk, provide "
        "a severity level (Low, Medium, or High) and a practical suggestion for mitigation. Focus on common "
        "construction risks such as budget overruns, schedule delays, safety hazards, supplier issues and "
        "regulatory hurdles, and consider location-specific risks.\n"
        'Respond with JSON of the form {"risks": [{"risk": str, "severity": "Low"|"Medium"|"High", '
        '"mitigation": str}]}.\n\n'
        f"Project Name: {name}\n"
        f"Project Budget: {budget}\n"
        f"Project Location: {location}\n"
        f"Project Description: {description}\n"
    )
    data = (client or get_client()).generate_json(prompt)

    risks = []
    for entry in _require_list(data, 'risks'):
        if not isinstance(entry, dict):
            continue
        severity = entry.get('severity')
        if severity not in RISK_SEVERITIES:
            logger.warning(f"Dropping risk with unknown severity: {severity!r}")
            continue
        risks.append({
            'risk': str(entry.get('risk', '')).strip(),
            'severity': severity,
            'mitigation': str(entry.get('mitigation', '')).strip(),
        })
    return {'risks': risks}


def summarize_daily_logs(logs, client=None):
    """
    Summarize project daily logs.

    ``logs`` is an iterable of ``(date, author_email, notes)`` newest first. With
    no logs the fixed summary is returned and the model is not called.
    """
    logs = list(logs)
    if not logs:
        return {'summary': NO_DAILY_LOGS_SUMMARY}

    history = '\n\n'.join(
        f"- Date: {date:%B %d, %Y}, Author: {author}\n  Log: {notes}" for date, author, notes in logs
    )
    prompt = (
        "You are an expert construction project manager's assistant. Based on the following daily log "
        "history, provide a concise summary of the project's status. Highlight key progress, any blockers "
        "or risks, and the overall momentum of the project.\n"
        'Respond with JSON of the form {"summary": str}.\n\n'
        f"Daily Log History:\n{history}\n"
    )
    data = (client or get_client()).generate_json(prompt)
    return {'summary': _require_text(data, 'summary')}


def summarize_client_interactions(interactions, client=None):
    """``interactions`` is an iterable of ``(date, type, notes)`` oldest first"""
    interactions = list(interactions)
    if not interactions:
        return {'summary': NO_INTERACTIONS_SUMMARY}

    log = '\n'.join(f"- {date:%Y-%m-%d} [{kind}] {notes}" for date, kind, notes in interactions)
    prompt = (
        "You are an expert CRM assistant. Based on the following interaction log, provide a concise summary "
        "of the client relationship. Highlight key events or decisions, the most recent topics of discussion "
        "and the overall health of the relationship (positive, neutral, needs attention).\n"
        'Respond with JSON of the form {"summary": str}.\n\n'
        f"Interaction Log:\n{log}\n"
    )
    data = (client or get_client()).generate_json(prompt)
    return {'summary': _require_text(data, 'summary')}


def summarize_supplier_performance(rating, evaluation_notes, contracts, purchase_orders, client=None):
    """
    ``contracts`` is ``[(title, effective_date), ...]`` and ``purchase_orders`` is
    ``[(quantity, item_name, status, created_at), ...]``.
    """
    contracts_log = '\n'.join(f"- Contract: {title}, Effective: {date:%Y-%m-%d}" for title, date in contracts)
    po_log = '\n'.join(
        f"- PO: {quantity}x {item_name}, Status: {status}, Date: {created:%Y-%m-%d}"
        for quantity, item_name, status, created in purchase_orders
    )
    performance = (
        f"Evaluation:\nRating: {rating or 'Not Rated'} / 5\nNotes: {evaluation_notes or 'No notes.'}\n\n"
        f"Contracts:\n{contracts_log or 'No contracts on record.'}\n\n"
        f"Purchase Order History:\n{po_log or 'No purchase orders on record.'}\n"
    )
    prompt = (
        "You are an expert procurement analyst. Based on the following performance data for a supplier, "
        "provide a concise summary. Highlight reliability based on purchase order history, key contract "
        "information and overall performance based on internal ratings and notes.\n"
        'Respond with JSON of the form {"summary": str}.\n\n'
        f"Supplier Performance Data:\n{performance}"
    )
    data = (client or get_client()).generate_json(prompt)
    return {'summary': _require_text(data, 'summary')}


def summarize_employee_performance(name, role, department, status, projects, reviews=(), client=None):
    """``projects`` is ``[(name, status), ...]``; ``reviews`` is ``[(rating, feedback), ...]``"""
    projects_log = '\n'.join(f"- {project} (Status: {project_status})" for project, project_status in projects)
    reviews_log = '\n'.join(f"- Rating {rating}/5: {feedback}" for rating, feedback in reviews)
    performance = (
        f"Employee Details:\nName: {name}\nRole: {role}\nDepartment: {department}\nStatus: {status}\n\n"
        f"Assigned Projects:\n{projects_log or 'No projects assigned.'}\n\n"
        f"Performance Reviews:\n{reviews_log or 'No reviews on record.'}\n"
    )
    prompt = (
        "You are an expert HR manager writing a performance review. Based on the following data for an "
        "employee, provide a concise summary. Highlight their primary role, the number and names of projects "
        "they are assigned to, and a brief summary of their involvement.\n"
        'Respond with JSON of the form {"summary": str}.\n\n'
        f"Employee Performance Data:\n{performance}"
    )
    data = (client or get_client()).generate_json(prompt)
    return {'summary': _require_text(data, 'summary')}


def suggest_project_tasks(name, description, client=None):
    """Return ``{'tasks': [{'name', 'description'}, ...]}``"""
    prompt = (
        "You are an expert construction project manager. Based on the following project details, generate "
        "a comprehensive list of common tasks required for such a project. The tasks should be logical and "
        "sequential where appropriate.\n"
        'Respond with JSON of the form {"tasks": [{"name": str, "description": str}]}.\n\n'
        f"Project Name: {name}\n"
        f"Project Description: {description}\n"
    )
    data = (client or get_client()).generate_json(prompt)

    tasks = []
    for entry in _require_list(data, 'tasks'):
        if isinstance(entry, str):
            entry = {'name': entry}
        if not isinstance(entry, dict) or not str(entry.get('name', '')).strip():
            continue
        tasks.append({
            'name': str(entry['name']).strip(),
            'description': str(entry.get('description') or '').strip(),
        })
    return {'tasks': tasks}


def suggest_iso_compliance(erp_description, client=None):
    """Return ``{'suggestions': [str, ...]}`` for aligning operations with ISO 9001"""
    prompt = (
        "You are an expert in ISO 9001 compliance and ERP systems.\n"
        "Based on the following description of current ERP operations, provide a list of actionable "
        "suggestions for improvement. Focus on changes that will facilitate the collection of feedback and "
        "continuous improvement, in line with ISO 9001 standards. Suggestions should be specific and practical.\n"
        'Respond with JSON of the form {"suggestions": [str]}.\n\n'
        f"ERP Operations Description: {erp_description}\n"
    )
    data = (client or get_client()).generate_json(prompt)
    suggestions = [str(s).strip() for s in _require_list(data, 'suggestions') if str(s).strip()]
    return {'suggestions': suggestions}
