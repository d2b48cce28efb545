"""Static brand tables shared by the router, the API and the form relay."""
from collections.abc import Mapping
from types import MappingProxyType

BRAND_IDS = ('properties', 'capital', 'advisors')

# Exact hostname keys; the bare domain and the www. variant are mapped separately.
HOSTNAME_BRANDS = MappingProxyType({
    'growthwaveadvisors.com': 'advisors',
    'www.growthwaveadvisors.com': 'advisors',
    'growthwavecapital.com': 'capital',
    'www.growthwavecapital.com': 'capital',
    'growthwaveproperties.com': 'properties',
    'www.growthwaveproperties.com': 'properties',
})

# Shared assets, platform tooling and this server's own endpoints.
PASSTHROUGH_PREFIXES = (
    '/images/',
    '/favicon/',
    '/fonts/',
    '/_astro/',
    '/dev/',
    '/.netlify/',
    '/api/',
)

FILE_EXTENSIONS = (
    '.html', '.css', '.js', '.json', '.xml', '.txt', '.svg', '.png',
    '.pdf', '.docx',
    '.jpg', '.jpeg', '.gif', '.webp', '.ico', '.woff', '.woff2', '.ttf',
)

CORE_COLORS = MappingProxyType({
    'oceanBlue': '#265077',
    'darkNavy': '#022140',
    'waveCyan': '#51A7F8',
    'neutralGray': '#595959',
    'lightGray': '#718EA7',
    'white': '#FFFFFF',
})

DIVISION_COLORS = MappingProxyType({
    'propertiesCoral': '#FF6B4A',
    'capitalPurple': '#7C3AED',
    'creditGreen': '#10B981',
})


def _accent_colors(hex_value, rgb):
    return MappingProxyType({
        'accent': hex_value,
        'accentLight': f'rgba({rgb}, 0.15)',
        'accentMedium': f'rgba({rgb}, 0.30)',
        'accentGlow': f'rgba({rgb}, 0.80)',
    })


def _logo_paths(brand_id):
    return MappingProxyType({
        'primary': f'/images/logos/{brand_id}/logo-primary.svg',
        'primaryTransparent': f'/images/logos/{brand_id}/logo-primary-transparent.svg',
        'reversed': f'/images/logos/{brand_id}/logo-reversed.svg',
    })


def _favicon_paths(brand_id):
    return MappingProxyType({
        'ico': f'/favicon/{brand_id}/favicon.ico',
        'png16': f'/favicon/{brand_id}/favicon-16x16.png',
        'png32': f'/favicon/{brand_id}/favicon-32x32.png',
        'appleTouchIcon': f'/favicon/{brand_id}/apple-touch-icon.png',
        'manifest': f'/favicon/{brand_id}/site.webmanifest',
    })


def _nav(brand_id, items):
    return tuple(MappingProxyType({'label': label, 'href': f'/{brand_id}/{slug}'}) for label, slug in items)


BRANDS = MappingProxyType({
    'properties': MappingProxyType({
        'id': 'properties',
        'name': 'GrowthWave Properties',
        'tagline': 'Building Wealth Through Real Estate',
        'domain': 'growthwaveproperties.com',
        'email': 'wilfred@growthwaveproperties.com',
        'colors': _accent_colors('#FF6B4A', '255, 107, 74'),
        'logos': _logo_paths('properties'),
        'favicons': _favicon_paths('properties'),
        'navigation': _nav('properties', [
            ('Home', ''),
            ('About', 'about/'),
            ('Approach', 'approach/'),
            ('Portfolio', 'portfolio/'),
            ('Contact', 'contact/'),
        ]),
        'seo': MappingProxyType({
            'titleSuffix': 'GrowthWave Properties',
            'description': (
                'Partner with experienced operators on cash-flowing multifamily properties. '
                'Value-add investments in the Midwest and South regions.'
            ),
            'twitterCard': 'summary_large_image',
        }),
    }),
    'capital': MappingProxyType({
        'id': 'capital',
        'name': 'GrowthWave Capital',
        'tagline': 'Fueling Your Business Growth',
        'domain': 'growthwavecapital.com',
        'email': 'wilfred@growthwavecapital.com',
        'colors': _accent_colors('#7C3AED', '124, 58, 237'),
        'logos': _logo_paths('capital'),
        'favicons': _favicon_paths('capital'),
        'navigation': _nav('capital', [
            ('Home', ''),
            ('Services', 'services/'),
            ('About', 'about/'),
            ('Apply', 'apply/'),
            ('Contact', 'contact/'),
        ]),
        'seo': MappingProxyType({
            'titleSuffix': 'GrowthWave Capital',
            'description': (
                'Access $50K-$250K+ in business credit and financing. Enterprise-grade technology '
                'platform built by a former Credit Union CTO with 15 years of banking experience.'
            ),
            'twitterCard': 'summary_large_image',
        }),
    }),
    'advisors': MappingProxyType({
        'id': 'advisors',
        'name': 'GrowthWave Advisors',
        'tagline': 'Building the Investor Success Flywheel™',
        'domain': 'growthwaveadvisors.com',
        'email': 'wilfred@growthwaveadvisors.com',
        # Ocean Blue doubles as the hub accent.
        'colors': _accent_colors('#265077', '38, 80, 119'),
        'logos': _logo_paths('advisors'),
        'favicons': _favicon_paths('advisors'),
        'navigation': _nav('advisors', [
            ('Home', ''),
            ('Our Companies', 'companies/'),
            ('About', 'about/'),
            ('Contact', 'contact/'),
        ]),
        'seo': MappingProxyType({
            'titleSuffix': 'GrowthWave Advisors',
            'description': (
                'Integrated financial services for investors. From credit repair through '
                'business financing to cash-flowing real estate investments.'
            ),
            'twitterCard': 'summary_large_image',
        }),
    }),
})

DIVISION_LINKS = (
    MappingProxyType({
        'name': 'GrowthWave Properties',
        'href': 'https://growthwaveproperties.com',
        'color': DIVISION_COLORS['propertiesCoral'],
        'glowColor': 'rgba(255, 107, 74, 0.80)',
    }),
    MappingProxyType({
        'name': 'GrowthWave Capital',
        'href': 'https://growthwavecapital.com',
        'color': DIVISION_COLORS['capitalPurple'],
        'glowColor': 'rgba(124, 58, 237, 0.80)',
    }),
    MappingProxyType({
        'name': 'Credit Sculpt',
        'href': 'https://creditsculpt.com',
        'color': DIVISION_COLORS['creditGreen'],
        'glowColor': 'rgba(16, 185, 129, 0.80)',
    }),
)


def brand_for_host(hostname, hostname_brands=HOSTNAME_BRANDS):
    if not isinstance(hostname, str) or not hostname:
        return None
    return hostname_brands.get(hostname)


def is_valid_brand_id(value):
    return isinstance(value, str) and value in BRANDS


def get_brand_config(brand_id):
    return BRANDS[brand_id]


def full_page_title(page_title, brand_id):
    """Return ``"About | GrowthWave Properties"`` style titles."""
    return f"{page_title} | {get_brand_config(brand_id)['seo']['titleSuffix']}"


def brand_payload(brand_id):
    """Plain JSON-serialisable copy of a brand record."""
    config = get_brand_config(brand_id)
    payload = {key: (dict(value) if isinstance(value, Mapping) else value) for key, value in config.items()}
    payload['navigation'] = [dict(item) for item in config['navigation']]
    payload['coreColors'] = dict(CORE_COLORS)
    payload['divisionLinks'] = [dict(link) for link in DIVISION_LINKS]
    return payload
