"""Server-rendered search and detail views."""
from __future__ import annotations

from html import escape
from typing import Any, Mapping, Sequence
from urllib.parse import quote, urlencode

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from ..core.config import settings
from ..data.catalog import get_catalog
from ..repositories import properties as properties_repo
from ..schemas.properties import ANY_TYPE, NO_MAX_BEDS, FilterCriteria, Property
from ..services.favorites import FavoritesStore, get_favorites_store
from ..services.formatting import format_date, format_price, image_path, results_summary
from ..services.gallery import GalleryState
from ..services.sanitize import sanitize_html

router = APIRouter()

FILTER_PARAMS = ("type", "minPrice", "maxPrice", "minBeds", "maxBeds", "postcode", "dateFrom", "dateTo")

LAYOUT = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>{title}</title>
    <script src="https://cdn.tailwindcss.com"></script>
</head>
<body class="min-h-screen bg-slate-50 text-slate-900">
    <div class="border-b border-slate-200 bg-[#003366] text-white">
        <div class="mx-auto flex max-w-6xl items-center justify-between px-6 py-4">
            <a href="/" class="text-lg font-semibold">Property Search</a>
            <span class="text-sm">&#9733; Favorites ({favorites_count})</span>
        </div>
    </div>
    <main class="mx-auto max-w-6xl px-6 py-8">
{content}
    </main>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
def search_page(
    request: Request,
    catalog: tuple[Property, ...] = Depends(get_catalog),
    store: FavoritesStore = Depends(get_favorites_store),
) -> HTMLResponse:
    """Filter form, matching properties and the favorites sidebar."""

    params = request.query_params
    raw_criteria = {key: params[key] for key in FILTER_PARAMS if key in params}
    searched = bool(raw_criteria) or "search" in params
    criteria = FilterCriteria.model_validate(raw_criteria)
    results = properties_repo.filter_properties(catalog, criteria) if searched else list(catalog)

    if results:
        cards = "\n".join(_render_card(prop, store.is_favorite(prop.id)) for prop in results)
    else:
        cards = (
            '<div class="col-span-full rounded-xl border border-dashed border-slate-300 p-8 text-center">'
            "<h3 class=\"text-lg font-semibold\">No properties found</h3>"
            "<p class=\"text-sm text-slate-500\">Try adjusting your search criteria to find more properties.</p>"
            "</div>"
        )

    content = f"""
        <div class="grid gap-6 lg:grid-cols-[1fr_2fr_1fr]">
            <aside>{_render_filter_form(criteria, catalog)}</aside>
            <section>
                <h2 class="text-xl font-semibold">Properties for Sale</h2>
                <p class="text-sm text-slate-500">{escape(results_summary(len(results), searched))}</p>
                <div class="mt-4 grid gap-4">{cards}</div>
            </section>
            <aside>{_render_favorites(store.favorites)}</aside>
        </div>"""
    return _page("Property Search", content, store.count)


@router.get("/property/{property_id:path}", response_class=HTMLResponse)
def property_page(
    property_id: str,
    image: int = 0,
    lightbox: bool = False,
    catalog: tuple[Property, ...] = Depends(get_catalog),
    store: FavoritesStore = Depends(get_favorites_store),
) -> HTMLResponse:
    """Detail view; an unknown id renders the not-found page with a 404."""

    prop = properties_repo.get_property(catalog, property_id)
    if prop is None:
        content = """
        <div class="py-16 text-center">
            <h1 class="text-2xl font-semibold">Property Not Found</h1>
            <p class="mt-2 text-slate-500">The property you're looking for doesn't exist or has been removed.</p>
            <a href="/" class="mt-6 inline-block text-[#003366] underline">&larr; Back to Search</a>
        </div>"""
        return _page("Property Not Found", content, store.count, status_code=status.HTTP_404_NOT_FOUND)

    gallery = GalleryState(image_count=len(prop.images), index=image)
    if lightbox:
        gallery.open_lightbox()

    content = f"""
        <nav class="mb-4"><a href="/" class="text-[#003366] underline">&larr; Back to Search</a></nav>
        <div class="grid gap-6 lg:grid-cols-2">
            {_render_gallery(prop, gallery)}
            {_render_info(prop, store.is_favorite(prop.id))}
        </div>
        {_render_tabs(prop)}
        {_render_lightbox(prop, gallery) if gallery.lightbox_open else ""}"""
    return _page(f"{prop.type} in {prop.location}", content, store.count)


@router.post("/favorites/{property_id}/add", include_in_schema=False)
def add_favorite_form(
    property_id: str,
    request: Request,
    catalog: tuple[Property, ...] = Depends(get_catalog),
    store: FavoritesStore = Depends(get_favorites_store),
) -> RedirectResponse:
    """Button handler for the HTML views."""

    store.add(properties_repo.get_property(catalog, property_id))
    return _back(request)


@router.post("/favorites/{property_id:path}/remove", include_in_schema=False)
def remove_favorite_form(
    property_id: str,
    request: Request,
    store: FavoritesStore = Depends(get_favorites_store),
) -> RedirectResponse:
    store.remove(property_id)
    return _back(request)


@router.post("/favorites/clear", include_in_schema=False)
def clear_favorites_form(
    request: Request,
    store: FavoritesStore = Depends(get_favorites_store),
) -> RedirectResponse:
    store.clear()
    return _back(request)


def _page(title: str, content: str, favorites_count: int, status_code: int = 200) -> HTMLResponse:
    html = LAYOUT.format(title=escape(title), favorites_count=favorites_count, content=content)
    return HTMLResponse(content=html, status_code=status_code)


def _back(request: Request) -> RedirectResponse:
    # Only same-site referers, so the form posts cannot be used as an open redirect.
    referer = request.headers.get("referer", "")
    base = str(request.base_url)
    target = referer if referer.startswith(base) else "/"
    return RedirectResponse(url=target, status_code=status.HTTP_303_SEE_OTHER)


def _path_id(property_id: str) -> str:
    """Encode an id as a single URL path segment, then escape it for markup."""

    return escape(quote(property_id, safe=""))


def _img(path: str) -> str:
    return escape(image_path(path, settings.image_base_url))


def _render_card(prop: Property, is_favorite: bool) -> str:
    badge = '<span class="text-amber-500">&#9733;</span> ' if is_favorite else ""
    button = (
        '<button class="rounded border px-3 py-1 text-sm text-slate-400" disabled>&#9733; Saved</button>'
        if is_favorite
        else (
            f'<form method="post" action="/favorites/{_path_id(prop.id)}/add">'
            '<button class="rounded border px-3 py-1 text-sm">&#9825; Add to Favorites</button></form>'
        )
    )
    return f"""
                <article class="flex gap-4 rounded-xl border border-slate-200 bg-white p-4">
                    <img src="{_img(prop.images[0])}" alt="{escape(prop.type)} in {escape(prop.location)}" class="h-28 w-40 rounded object-cover" />
                    <div class="flex-1">
                        <p class="text-lg font-semibold">{badge}{escape(format_price(prop.price))}</p>
                        <p class="text-sm text-slate-500">{escape(prop.type)} &middot; {prop.bedrooms} bed &middot; {escape(prop.postcode)}</p>
                        <p class="text-sm">{escape(prop.location)}</p>
                        <div class="mt-1 text-sm text-slate-600">{sanitize_html(prop.description)}</div>
                        <p class="mt-1 text-xs text-slate-400">Added {escape(format_date(prop.date_added))}</p>
                        <div class="mt-2 flex gap-2">
                            <a href="/property/{_path_id(prop.id)}" class="rounded bg-[#003366] px-3 py-1 text-sm text-white">View Details</a>
                            {button}
                        </div>
                    </div>
                </article>"""


def _render_filter_form(criteria: FilterCriteria, catalog: Sequence[Property]) -> str:
    type_options = [(ANY_TYPE, "Any Type")] + [(value, value) for value in properties_repo.list_types(catalog)]
    postcode_options = [("", "Any Area")] + [(value, value) for value in properties_repo.list_postcodes(catalog)]
    min_bed_options = [(0, "No min")] + [(count, str(count)) for count in range(1, 7)]
    max_bed_options = [(NO_MAX_BEDS, "No max")] + [(count, str(count)) for count in range(1, 7)]

    return f"""
                <form method="get" action="/" class="space-y-4 rounded-xl border border-slate-200 bg-white p-4">
                    <h3 class="font-semibold">Filter Properties</h3>
                    <input type="hidden" name="search" value="1" />
                    {_select("type", "Property Type", type_options, criteria.type)}
                    <label class="block text-sm">Min price
                        <input type="number" name="minPrice" step="25000" value="{_value(criteria.min_price, settings.price_slider_min)}" class="w-full rounded border px-2 py-1" />
                    </label>
                    <label class="block text-sm">Max price
                        <input type="number" name="maxPrice" step="25000" value="{_value(criteria.max_price, settings.price_slider_max)}" class="w-full rounded border px-2 py-1" />
                    </label>
                    {_select("minBeds", "Min bedrooms", min_bed_options, criteria.min_beds)}
                    {_select("maxBeds", "Max bedrooms", max_bed_options, criteria.max_beds)}
                    <label class="block text-sm">Added from
                        <input type="date" name="dateFrom" value="{_value(criteria.date_from, "")}" class="w-full rounded border px-2 py-1" />
                    </label>
                    <label class="block text-sm">Added to
                        <input type="date" name="dateTo" value="{_value(criteria.date_to, "")}" class="w-full rounded border px-2 py-1" />
                    </label>
                    {_select("postcode", "Postcode Area", postcode_options, criteria.postcode)}
                    <div class="flex gap-2">
                        <button class="rounded bg-[#003366] px-4 py-2 text-sm text-white">Search</button>
                        <a href="/" class="rounded border px-4 py-2 text-sm">Reset</a>
                    </div>
                </form>"""


def _select(name: str, label: str, options: Sequence[tuple[Any, str]], selected: Any) -> str:
    rendered = "".join(
        f'<option value="{escape(str(value))}"{" selected" if value == selected else ""}>{escape(text)}</option>'
        for value, text in options
    )
    return (
        f'<label class="block text-sm">{escape(label)}'
        f'<select name="{name}" class="w-full rounded border px-2 py-1">{rendered}</select></label>'
    )


def _value(value: Any, default: Any) -> str:
    if value is None:
        value = default
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return escape(str(value))


def _render_favorites(favorites: Sequence[Mapping[str, Any]]) -> str:
    if not favorites:
        body = (
            '<p class="text-sm text-slate-500">No favorites yet</p>'
            '<p class="text-xs text-slate-400">Use "Add to Favorites" on any property to save it here</p>'
        )
        clear = ""
    else:
        items = "".join(_render_favorite_item(fav) for fav in favorites)
        body = f'<ul class="space-y-2">{items}</ul>'
        clear = (
            '<form method="post" action="/favorites/clear">'
            '<button class="text-xs text-red-600" title="Clear all favorites">Clear All</button></form>'
        )

    return f"""
                <div class="rounded-xl border border-slate-200 bg-white p-4">
                    <div class="mb-2 flex items-center justify-between">
                        <h3 class="font-semibold">&#9733; Favorites ({len(favorites)})</h3>
                        {clear}
                    </div>
                    {body}
                </div>"""


def _render_favorite_item(fav: Mapping[str, Any]) -> str:
    # Snapshots may come from dropped payloads, so every field is optional here.
    fav_id = _path_id(str(fav.get("id", "")))
    images = fav.get("images") or []
    thumb = f'<img src="{_img(str(images[0]))}" alt="" class="h-10 w-14 rounded object-cover" />' if images else ""
    price = fav.get("price")
    price_text = escape(format_price(price)) if isinstance(price, (int, float)) else ""
    return f"""
                        <li class="flex items-center gap-2">
                            <a href="/property/{fav_id}" class="flex flex-1 items-center gap-2">
                                {thumb}
                                <span class="text-sm"><strong>{price_text}</strong><br />{escape(str(fav.get("location", "")))}</span>
                            </a>
                            <form method="post" action="/favorites/{fav_id}/remove">
                                <button class="text-slate-400" title="Remove from favorites">&times;</button>
                            </form>
                        </li>"""


def _render_gallery(prop: Property, gallery: GalleryState) -> str:
    base = f"/property/{_path_id(prop.id)}"
    thumbs = "".join(
        f'<a href="{base}?{urlencode({"image": index})}" class="{"ring-2 ring-[#003366]" if index == gallery.index else ""}">'
        f'<img src="{_img(path)}" alt="Thumbnail {index + 1}" loading="lazy" class="h-14 w-20 rounded object-cover" /></a>'
        for index, path in enumerate(prop.images)
    )
    return f"""
            <section>
                <div class="relative">
                    <a href="{base}?{urlencode({"image": gallery.index, "lightbox": 1})}">
                        <img src="{_img(prop.images[gallery.index])}" alt="{escape(prop.type)} in {escape(prop.location)}" class="w-full rounded-xl" />
                    </a>
                    <a href="{base}?{urlencode({"image": gallery.peek_previous()})}" class="absolute left-2 top-1/2 rounded bg-white/80 px-2">&lsaquo;</a>
                    <a href="{base}?{urlencode({"image": gallery.peek_next()})}" class="absolute right-2 top-1/2 rounded bg-white/80 px-2">&rsaquo;</a>
                    <span class="absolute bottom-2 right-2 rounded bg-black/60 px-2 text-xs text-white">{gallery.position}</span>
                </div>
                <div class="mt-2 flex flex-wrap gap-2">{thumbs}</div>
            </section>"""


def _render_info(prop: Property, is_favorite: bool) -> str:
    if is_favorite:
        button = '<button class="rounded border px-4 py-2 text-slate-400" disabled>&#9733; Saved to Favorites</button>'
    else:
        button = (
            f'<form method="post" action="/favorites/{_path_id(prop.id)}/add">'
            '<button class="rounded bg-[#003366] px-4 py-2 text-white">&#9825; Add to Favorites</button></form>'
        )
    return f"""
            <section class="space-y-3">
                <h1 class="text-3xl font-bold">{escape(format_price(prop.price))}</h1>
                <span class="text-xs uppercase text-slate-500">Guide price</span>
                <h2 class="text-xl">{escape(prop.address or prop.location)}</h2>
                <p class="text-slate-500">{escape(prop.location)}</p>
                <dl class="grid grid-cols-2 gap-2 text-sm">
                    <dt>Type</dt><dd>{escape(prop.type)}</dd>
                    <dt>Bedrooms</dt><dd>{prop.bedrooms}</dd>
                    <dt>Postcode</dt><dd>{escape(prop.postcode)}</dd>
                    <dt>Added</dt><dd>{escape(format_date(prop.date_added, style="long"))}</dd>
                </dl>
                <div class="text-slate-700">{sanitize_html(prop.description)}</div>
                {button}
            </section>"""


def _render_tabs(prop: Property) -> str:
    if prop.map_url:
        location = (
            f'<iframe src="{escape(prop.map_url)}" width="100%" height="450" loading="lazy" '
            f'referrerpolicy="no-referrer-when-downgrade" title="Map showing location of {escape(prop.location)}"></iframe>'
        )
    else:
        location = (
            "<p>Interactive map not available for this property</p>"
            f"<p>Location: {escape(prop.location)}, {escape(prop.postcode)}</p>"
        )
    return f"""
        <section class="mt-8 space-y-8">
            <div>
                <h3 class="text-lg font-semibold">Full Description</h3>
                <div class="prose">{sanitize_html(prop.long_description)}</div>
                <h4 class="mt-4 font-semibold">Property Details</h4>
                <ul class="text-sm">
                    <li><strong>Property Type:</strong> {escape(prop.type)}</li>
                    <li><strong>Bedrooms:</strong> {prop.bedrooms}</li>
                    <li><strong>Tenure:</strong> {escape(prop.tenure or "Freehold")}</li>
                    <li><strong>Council Tax Band:</strong> {escape(prop.council_tax_band or "TBC")}</li>
                    <li><strong>Postcode:</strong> {escape(prop.postcode)}</li>
                    <li><strong>Date Added:</strong> {escape(format_date(prop.date_added, style="long"))}</li>
                </ul>
            </div>
            <div>
                <h3 class="text-lg font-semibold">Floor Plan</h3>
                <img src="{_img(prop.floor_plan)}" alt="Floor plan for {escape(prop.location)}" class="max-w-full" />
            </div>
            <div>
                <h3 class="text-lg font-semibold">Location</h3>
                <p>{escape(prop.address or prop.location)}</p>
                {location}
            </div>
        </section>"""


def _render_lightbox(prop: Property, gallery: GalleryState) -> str:
    base = f"/property/{_path_id(prop.id)}"
    return f"""
        <div class="fixed inset-0 flex flex-col items-center justify-center bg-black/90 text-white" id="lightbox">
            <a href="{base}?{urlencode({"image": gallery.index})}" class="absolute right-4 top-4 text-2xl">&#10005;</a>
            <div class="flex items-center gap-4">
                <a href="{base}?{urlencode({"image": gallery.peek_previous(), "lightbox": 1})}" class="text-4xl">&lsaquo;</a>
                <img src="{_img(prop.images[gallery.index])}" alt="{escape(prop.type)} in {escape(prop.location)}" class="max-h-[80vh]" />
                <a href="{base}?{urlencode({"image": gallery.peek_next(), "lightbox": 1})}" class="text-4xl">&rsaquo;</a>
            </div>
            <div class="mt-4 text-sm">{gallery.position}</div>
        </div>"""
