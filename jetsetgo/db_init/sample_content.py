from jetsetgo.models.enums import ContentType

SAMPLE_CONTENT = [
    {
        'title': 'About JetSetGo',
        'slug': 'about',
        'content_type': ContentType.ABOUT,
        'meta_description': 'Who we are and how JetSetGo finds your next flight.',
        'content': (
            "<p>JetSetGo searches live fares from hundreds of airlines so you can "
            "compare prices, schedules and cabins in one place.</p>"
            "<p>Book in a few clicks and manage every trip from your dashboard.</p>"
        ),
    },
    {
        'title': 'Frequently Asked Questions',
        'slug': 'faq',
        'content_type': ContentType.FAQ,
        'meta_description': 'Answers to common questions about searching and booking.',
        'content': (
            "<h3>How do I find my booking?</h3>"
            "<p>Sign in and open My Trips, or look it up by its 6-character booking reference.</p>"
            "<h3>Can I cancel a booking?</h3>"
            "<p>Confirmed bookings can be cancelled from the booking details page.</p>"
        ),
    },
    {
        'title': 'Terms of Service',
        'slug': 'terms',
        'content_type': ContentType.TERMS,
        'content': "<p>By using JetSetGo you agree to these terms.</p>",
    },
    {
        'title': 'Privacy Policy',
        'slug': 'privacy',
        'content_type': ContentType.PRIVACY,
        'content': "<p>We only store the data needed to manage your account and bookings.</p>",
    },
    {
        'title': 'Contact Us',
        'slug': 'contact',
        'content_type': ContentType.CONTACT,
        'content': "<p>Questions? Use the feedback form or write to support@jetsetgo.example.</p>",
    },
]
