"""Mirror CRM contact-to-company associations into a local SQL store."""
