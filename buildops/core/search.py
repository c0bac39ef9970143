"""
Global search across the main ERP collections.

Each collection is searched with a case-insensitive prefix match on its
display field; results are merged in collection order, de-duplicated by URL
and capped.
"""
MIN_TERM_LENGTH = 2
PER_COLLECTION_LIMIT = 5
MAX_RESULTS = 10


def _search_sources():
    from buildops.projects.models import Project
    from buildops.parties.models import Client, Supplier
    from buildops.hr.models import Employee
    from buildops.inventory.models import InventoryItem
    from buildops.assets.models import Asset
    from buildops.invoicing.models import Invoice

    # (type label, queryset, lookup field, name getter, url getter, context getter)
    return [
        ('Project', Project.objects.all(), 'name',
         lambda o: o.name, lambda o: f'/projects/{o.pk}', lambda o: o.status),
        ('Client', Client.objects.all(), 'name',
         lambda o: o.name, lambda o: f'/clients/{o.pk}', lambda o: o.email),
        ('Employee', Employee.objects.all(), 'name',
         lambda o: o.name, lambda o: f'/employees/{o.pk}', lambda o: o.role),
        ('Supplier', Supplier.objects.all(), 'name',
         lambda o: o.name, lambda o: f'/suppliers/{o.pk}', lambda o: o.contact_person),
        ('Inventory Item', InventoryItem.objects.all(), 'name',
         lambda o: o.name, lambda o: f'/inventory/{o.pk}', lambda o: f'Qty: {o.quantity}'),
        ('Asset', Asset.objects.all(), 'name',
         lambda o: o.name, lambda o: f'/assets/{o.pk}', lambda o: o.status),
        ('Invoice', Invoice.objects.select_related('client'), 'invoice_number',
         lambda o: o.invoice_number, lambda o: f'/invoices/{o.pk}', lambda o: o.client.name if o.client_id else ''),
    ]


def global_search(term):
    """Return ``[{name, type, url, context}, ...]`` for ``term``"""
    term = (term or '').strip()
    if len(term) < MIN_TERM_LENGTH:
        return []

    results = []
    seen_urls = set()
    for type_label, queryset, field, get_name, get_url, get_context in _search_sources():
        matches = queryset.filter(**{f'{field}__istartswith': term}).order_by(field)[:PER_COLLECTION_LIMIT]
        for obj in matches:
            url = get_url(obj)
            if url in seen_urls:
                continue
            seen_urls.add(url)
            results.append({
                'name': get_name(obj),
                'type': type_label,
                'url': url,
                'context': get_context(obj) or '',
            })

    return results[:MAX_RESULTS]
