def load_all_models():
    import model.user                                    # noqa: F401
    import model.followers                               # noqa: F401
    import model.social.models                           # noqa: F401
    import model.review                                  # noqa: F401
    import model.feedback                                # noqa: F401
    import model.service_area                            # noqa: F401
