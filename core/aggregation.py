from type_defs.segments import Segment


def aggregate_segments(
    batches: list[list[Segment]], batch_size: int | None
) -> list[Segment]:
    """
    Merges per-batch segments into one document-wide list.

    Batch i is shifted by i * batch_size pages (batches are contiguous and
    only the last may be shorter). Order within and across batches is kept.
    The input segments are left untouched.

    Parameters
    ----------
    batches : list of list of Segment
        Segments of each batch, in batch order, with batch-relative pages.

    batch_size : int or None
        Pages per batch. None means a single batch covering the document.

    Returns
    -------
    list of Segment
        Segments with document-relative page numbers.
    """

    step = batch_size or 1
    combined_output: list[Segment] = []

    for batch_index, segments in enumerate(batches):
        page_offset = batch_index * step
        combined_output.extend(
            segment.model_copy(update={"page_number": segment.page_number + page_offset})
            for segment in segments
        )

    return combined_output
