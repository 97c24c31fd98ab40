"""
Utilidades de fechas para reportes
Las fechas se guardan en UTC naive; los filtros llegan como ISO-8601
(normalmente con offset +06:00, hora de Bishkek)
"""
import re
from datetime import datetime, date, time, timedelta, timezone

DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utcnow():
    """Hora actual en UTC sin tzinfo (mismo formato que las columnas DateTime)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def business_tz(utc_offset_hours=0):
    return timezone(timedelta(hours=utc_offset_hours))


def parse_date_param(value, end_of_day=False, utc_offset_hours=0):
    """
    Convierte un parámetro de fecha a datetime UTC naive.

    Acepta 'YYYY-MM-DD' (inicio o fin del día según end_of_day) o un
    timestamp ISO-8601 con o sin offset. Sin offset se interpreta en la zona
    del negocio. Un valor vacío o mal formado devuelve None (sin filtro).
    """
    if not value:
        return None

    value = value.strip()
    # En query strings sin codificar el '+' del offset llega como espacio
    if "T" in value and " " in value:
        value = value.replace(" ", "+")

    try:
        if DATE_ONLY_RE.match(value):
            day = date.fromisoformat(value)
            parsed = datetime.combine(day, time.max if end_of_day else time.min)
        else:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=business_tz(utc_offset_hours))
        # Fechas en los extremos del calendario no caben al pasar a UTC
        return parsed.astimezone(timezone.utc).replace(tzinfo=None)
    except (ValueError, OverflowError):
        return None


def get_date_range(args, utc_offset_hours=0):
    """
    Lee dateFrom/dateTo (o startDate/endDate) de los query params.
    Cada límite es independiente: si uno no se puede parsear se ignora.
    """
    raw_from = args.get("dateFrom") or args.get("startDate")
    raw_to = args.get("dateTo") or args.get("endDate")

    date_from = parse_date_param(raw_from, utc_offset_hours=utc_offset_hours)
    date_to = parse_date_param(raw_to, end_of_day=True, utc_offset_hours=utc_offset_hours)
    return date_from, date_to


def to_local(dt, utc_offset_hours=0):
    """UTC naive -> hora local naive del negocio"""
    return dt + timedelta(hours=utc_offset_hours)


def choose_grouping(date_from, date_to):
    """Agrupación de gráficos según largo del período: day | week | month"""
    diff_days = (date_to - date_from).total_seconds() / 86400
    if diff_days > 90:
        return "month"
    if diff_days > 14:
        return "week"
    return "day"


def build_buckets(date_from, date_to, utc_offset_hours=0, grouping=None):
    """
    Divide el rango [date_from, date_to] (UTC naive) en tramos consecutivos.

    Returns:
        list[dict]: cada tramo con 'label', 'start' y 'end' en UTC naive
        (límites inclusivos), en orden cronológico.
    """
    if date_from is None or date_to is None or date_from > date_to:
        return []

    try:
        return _calendar_buckets(date_from, date_to, timedelta(hours=utc_offset_hours), grouping)
    except (ValueError, OverflowError):
        # Rango que llega al año 9999: sin gráfico
        return []


def _calendar_buckets(date_from, date_to, offset, grouping=None):
    grouping = grouping or choose_grouping(date_from, date_to)
    local_start = date_from + offset
    local_end = date_to + offset

    buckets = []
    current = local_start.date()
    last_day = local_end.date()

    while current <= last_day:
        if grouping == "month":
            if current.month == 12:
                next_start = date(current.year + 1, 1, 1)
            else:
                next_start = date(current.year, current.month + 1, 1)
            label = f"{current.month:02d}.{current.year}"
        elif grouping == "week":
            next_start = current + timedelta(days=7)
            week_last = min(next_start - timedelta(days=1), last_day)
            label = f"{current.strftime('%d.%m')}-{week_last.strftime('%d.%m')}"
        else:
            next_start = current + timedelta(days=1)
            label = current.strftime("%d.%m")

        start = max(datetime.combine(current, time.min), local_start)
        end = min(datetime.combine(next_start, time.min) - timedelta(microseconds=1), local_end)
        buckets.append({"label": label, "start": start - offset, "end": end - offset})
        current = next_start

    return buckets


def find_bucket(buckets, moment):
    """Índice del tramo que contiene 'moment' (UTC naive), o None"""
    if moment is None:
        return None
    for index, bucket in enumerate(buckets):
        if bucket["start"] <= moment <= bucket["end"]:
            return index
    return None
